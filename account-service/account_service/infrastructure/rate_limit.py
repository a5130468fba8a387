from slowapi import Limiter
from slowapi.util import get_remote_address
from ..config import settings

limiter = Limiter(key_func=get_remote_address, storage_uri=settings.RATE_LIMIT_STORAGE_URI)

SIGN_UP_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
# tighter for log-in (brute force)
LOG_IN_LIMIT = f"{settings.LOGIN_RATE_LIMIT_PER_MINUTE}/minute"
