from typing import Any

from pydantic import BaseModel

from ...domain.entities import Identity, ProvisioningResult

class UserResp(BaseModel):
    id: str
    email: str
    role: str
    user_metadata: dict[str, Any] = {}

    @classmethod
    def from_identity(cls, user: Identity) -> "UserResp":
        return cls(id=user.id, email=user.email, role=user.role.value, user_metadata=user.metadata)

class ResultResp(BaseModel):
    error: str | None = None
    status: int
    user: UserResp | None = None

    @classmethod
    def from_result(cls, result: ProvisioningResult) -> "ResultResp":
        user = UserResp.from_identity(result.user) if result.user else None
        return cls(error=result.error, status=result.status, user=user)

class MeResp(BaseModel):
    id: str
    email: str
    role: str
