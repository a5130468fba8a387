import uuid

import structlog

from ...domain.entities import ProvisioningResult, Role
from ...domain.errors import ProviderError, StorageError
from ..dto import InstructorSignUpInput, StudentSignUpInput
from ..ports import IIdentityProvider, IImageStorage, ILayoutInvalidator

logger = structlog.get_logger()

ALREADY_EXISTS = "User already exists"


def headshot_path() -> str:
    return f"{uuid.uuid4()}/image"


class StudentSignUp:
    def __init__(self, provider: IIdentityProvider, invalidator: ILayoutInvalidator):
        self.provider = provider
        self.invalidator = invalidator

    def execute(self, data: StudentSignUpInput) -> ProvisioningResult:
        metadata = {
            "interest": data.interest,
            "name": data.name,
            "role": Role.STUDENT.value,
        }
        try:
            user = self.provider.sign_up(data.email, data.password, metadata)
        except ProviderError as e:
            logger.info("student_sign_up_rejected", email=data.email, status=e.status, error=e.message)
            return ProvisioningResult.fail(e.message, e.status)

        # the provider answers an existing confirmed address with an empty identity list
        if user.has_no_identities:
            logger.info("student_sign_up_duplicate", email=data.email)
            return ProvisioningResult.fail(ALREADY_EXISTS, 409)

        logger.info("student_signed_up", user_id=user.id, email=user.email)
        self.invalidator.invalidate_layout()
        return ProvisioningResult.ok(user)


class InstructorSignUp:
    """Upload the headshot, then register the instructor identity.

    The uploaded object is removed again when the provider definitely
    refused the registration. When the outcome is unknown (no answer) it is
    kept, since a new identity may already reference it.
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        storage: IImageStorage,
        invalidator: ILayoutInvalidator,
        storage_url: str,
    ):
        self.provider = provider
        self.storage = storage
        self.invalidator = invalidator
        self.storage_url = storage_url

    def execute(self, data: InstructorSignUpInput) -> ProvisioningResult:
        path = headshot_path()
        try:
            full_path = self.storage.upload(path, data.image.content, data.image.content_type)
        except StorageError as e:
            logger.warning("instructor_upload_failed", email=data.email, error=e.message)
            return ProvisioningResult.fail(e.message, 500)

        image_url = f"{self.storage_url}{full_path}"
        metadata = {
            "interest": data.interest,
            "name": data.name,
            "occupation": data.occupation,
            "bio": data.bio,
            "url": data.url,
            "image": image_url,
            "role": Role.INSTRUCTOR.value,
        }
        try:
            user = self.provider.sign_up(data.email, data.password, metadata)
        except ProviderError as e:
            logger.info("instructor_sign_up_rejected", email=data.email, status=e.status, error=e.message)
            if e.definitive:
                self._discard_upload(path)
            else:
                # the identity may exist and point at this headshot
                logger.warning("instructor_sign_up_indeterminate", email=data.email, path=path)
            return ProvisioningResult.fail(e.message, e.status)

        if user.has_no_identities:
            logger.info("instructor_sign_up_duplicate", email=data.email)
            self._discard_upload(path)
            return ProvisioningResult.fail(ALREADY_EXISTS, 409)

        logger.info("instructor_signed_up", user_id=user.id, email=user.email, image=image_url)
        self.invalidator.invalidate_layout()
        return ProvisioningResult.ok(user)

    def _discard_upload(self, path: str) -> None:
        try:
            self.storage.remove(path)
        except StorageError as e:
            # the registration error is what the caller gets back
            logger.error("orphaned_headshot", path=path, error=e.message)
