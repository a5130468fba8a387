"""
Supabase adapters for the identity provider and headshot storage.

Both adapters wrap a `supabase.Client` handed in by the caller; a fresh client
is built per request by `get_supabase` because the auth client keeps the
signed-in session on the instance.
"""
from __future__ import annotations

from typing import Any

import httpx
import structlog
from storage3.utils import StorageException
from supabase import AuthApiError, AuthError, Client, create_client

from ..application.ports import IIdentityProvider, IImageStorage
from ..config import settings
from ..domain.entities import Identity
from ..domain.errors import ProviderError, StorageError

logger = structlog.get_logger()


def get_supabase() -> Client:
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def to_identity(user: Any, session: Any = None) -> Identity:
    identities = getattr(user, "identities", None)
    return Identity(
        id=str(user.id),
        email=user.email or "",
        metadata=dict(user.user_metadata or {}),
        identity_count=len(identities) if identities is not None else None,
        access_token=getattr(session, "access_token", None) if session else None,
    )


def _storage_message(exc: Exception) -> str:
    detail = exc.args[0] if exc.args else None
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("error") or detail)
    return getattr(exc, "message", None) or str(exc)


class SupabaseIdentityProvider(IIdentityProvider):
    def __init__(self, client: Client):
        self.client = client

    def sign_up(self, email: str, password: str, metadata: dict) -> Identity:
        try:
            res = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata},
            })
        except AuthError as e:
            # only an API answer proves the account was not created
            raise ProviderError(
                e.message, getattr(e, "status", None), definitive=isinstance(e, AuthApiError),
            ) from e
        except httpx.HTTPError as e:
            logger.error("supabase_unreachable", call="sign_up", error=str(e))
            raise ProviderError(str(e), definitive=False) from e
        if res.user is None:
            raise ProviderError("Registration failed")
        return to_identity(res.user, res.session)

    def sign_in(self, email: str, password: str) -> Identity:
        try:
            res = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            raise ProviderError(e.message, getattr(e, "status", None)) from e
        except httpx.HTTPError as e:
            logger.error("supabase_unreachable", call="sign_in", error=str(e))
            raise ProviderError(str(e), definitive=False) from e
        if res.user is None:
            raise ProviderError("Invalid login credentials", 400)
        return to_identity(res.user, res.session)


class SupabaseImageStorage(IImageStorage):
    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        try:
            res = self.client.storage.from_(self.bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type},
            )
        except (StorageException, httpx.HTTPError) as e:
            raise StorageError(_storage_message(e)) from e
        # older storage3 releases return the raw response without full_path
        return getattr(res, "full_path", None) or f"{self.bucket}/{path}"

    def remove(self, path: str) -> None:
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except (StorageException, httpx.HTTPError) as e:
            raise StorageError(_storage_message(e)) from e
