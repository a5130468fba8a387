from ..domain.entities import Identity, InstructorProfile, StudentProfile


class IIdentityProvider:
    def sign_up(self, email: str, password: str, metadata: dict) -> Identity: ...
    def sign_in(self, email: str, password: str) -> Identity: ...


class IImageStorage:
    def upload(self, path: str, content: bytes, content_type: str) -> str: ...
    def remove(self, path: str) -> None: ...


class IProfileRepository:
    def ensure_student(self, profile: StudentProfile) -> bool: ...
    def ensure_instructor(self, profile: InstructorProfile) -> bool: ...


class ILayoutInvalidator:
    def invalidate_layout(self) -> None: ...
