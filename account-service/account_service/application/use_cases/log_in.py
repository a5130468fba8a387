import structlog

from ...domain.entities import Identity, InstructorProfile, ProvisioningResult, Role, StudentProfile
from ...domain.errors import ProfileWriteError, ProviderError
from ..dto import LogInInput
from ..ports import IIdentityProvider, ILayoutInvalidator, IProfileRepository

logger = structlog.get_logger()


class _LogIn:
    role: Role

    def __init__(
        self,
        provider: IIdentityProvider,
        profiles: IProfileRepository,
        invalidator: ILayoutInvalidator,
    ):
        self.provider = provider
        self.profiles = profiles
        self.invalidator = invalidator

    def execute(self, data: LogInInput) -> ProvisioningResult:
        try:
            user = self.provider.sign_in(data.email, data.password)
        except ProviderError as e:
            logger.info("log_in_rejected", role=self.role.value, email=data.email, status=e.status, error=e.message)
            return ProvisioningResult.fail(e.message, e.status)

        rejected = self.check(user)
        if rejected is not None:
            logger.info("log_in_refused", role=self.role.value, email=data.email, status=rejected.status)
            return rejected

        try:
            created = self.ensure_profile(data.email, user)
        except ProfileWriteError as e:
            logger.error("profile_write_failed", role=self.role.value, user_id=user.id, error=e.message)
            return ProvisioningResult.fail(e.message, 500)

        if created:
            logger.info("profile_created", role=self.role.value, user_id=user.id, email=data.email)
        logger.info("logged_in", role=self.role.value, user_id=user.id)
        self.invalidator.invalidate_layout()
        return ProvisioningResult.ok(user)

    def check(self, user: Identity) -> ProvisioningResult | None: ...
    def ensure_profile(self, email: str, user: Identity) -> bool: ...


class StudentLogIn(_LogIn):
    role = Role.STUDENT

    def check(self, user: Identity) -> ProvisioningResult | None:
        if user.role is not Role.STUDENT:
            return ProvisioningResult.fail("You are not a student", 400)
        return None

    def ensure_profile(self, email: str, user: Identity) -> bool:
        meta = user.metadata
        return self.profiles.ensure_student(StudentProfile(
            id=user.id,
            email=email,
            name=meta.get("name"),
            interest=meta.get("interest"),
            following_list=[],
        ))


class InstructorLogIn(_LogIn):
    role = Role.INSTRUCTOR

    def check(self, user: Identity) -> ProvisioningResult | None:
        if user.has_no_identities:
            return ProvisioningResult.fail("User not found", 404)
        if user.role is not Role.INSTRUCTOR:
            return ProvisioningResult.fail("You are not an instructor", 400)
        return None

    def ensure_profile(self, email: str, user: Identity) -> bool:
        meta = user.metadata
        return self.profiles.ensure_instructor(InstructorProfile(
            id=user.id,
            email=email,
            name=meta.get("name"),
            interest=meta.get("interest"),
            occupation=meta.get("occupation"),
            bio=meta.get("bio"),
            url=meta.get("url"),
            image=meta.get("image"),
            followers=[],
        ))
