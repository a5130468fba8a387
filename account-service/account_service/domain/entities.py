from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"


def resolve_role(metadata: dict[str, Any]) -> Role:
    """Role of an identity from its metadata.

    The ``role`` tag is written at registration. Accounts created before the
    tag existed are told apart by the headshot: only instructors have an
    ``image`` entry.
    """
    tag = metadata.get("role")
    if tag in (Role.STUDENT.value, Role.INSTRUCTOR.value):
        return Role(tag)
    return Role.INSTRUCTOR if metadata.get("image") else Role.STUDENT


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)
    # None when the provider did not report linked identities
    identity_count: int | None = None
    access_token: str | None = None

    @property
    def role(self) -> Role:
        return resolve_role(self.metadata)

    @property
    def has_no_identities(self) -> bool:
        return self.identity_count == 0


@dataclass(frozen=True)
class StudentProfile:
    id: str
    email: str
    name: str | None
    interest: str | None
    following_list: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class InstructorProfile:
    id: str
    email: str
    name: str | None
    interest: str | None
    occupation: str | None
    bio: str | None
    url: str | None
    image: str | None
    followers: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProvisioningResult:
    error: str | None
    status: int
    user: Identity | None

    @classmethod
    def ok(cls, user: Identity) -> "ProvisioningResult":
        return cls(error=None, status=200, user=user)

    @classmethod
    def fail(cls, error: str, status: int) -> "ProvisioningResult":
        return cls(error=error, status=status, user=None)
