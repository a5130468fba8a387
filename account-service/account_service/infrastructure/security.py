from jose import jwt, JWTError
from ..config import settings


def decode_access_token(token: str) -> dict:
    """Claims of a Supabase-issued access token, or JWTError."""
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )
    if not payload.get("sub"):
        raise JWTError("No subject")
    return payload
