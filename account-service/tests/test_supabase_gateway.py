import httpx
import pytest
from types import SimpleNamespace
from storage3.utils import StorageException
from supabase import AuthApiError

from account_service.domain.errors import ProviderError, StorageError
from account_service.infrastructure.supabase_gateway import (
    SupabaseIdentityProvider,
    SupabaseImageStorage,
    to_identity,
)
from conftest import make_auth_response, make_user


def test_to_identity_maps_user_and_session():
    user = make_user(user_id="u-1", email="ann@example.com", metadata={"name": "Ann"}, identities=2)

    identity = to_identity(user, SimpleNamespace(access_token="jwt"))

    assert identity.id == "u-1"
    assert identity.email == "ann@example.com"
    assert identity.metadata == {"name": "Ann"}
    assert identity.identity_count == 2
    assert identity.access_token == "jwt"


def test_to_identity_without_identities_or_session():
    identity = to_identity(make_user(identities=None))

    assert identity.identity_count is None
    assert identity.has_no_identities is False
    assert identity.access_token is None


def test_sign_up_passes_metadata(supabase_client):
    supabase_client.auth.sign_up.return_value = make_auth_response(make_user(), access_token=None)
    provider = SupabaseIdentityProvider(supabase_client)

    identity = provider.sign_up("ann@example.com", "secret123", {"name": "Ann", "role": "student"})

    supabase_client.auth.sign_up.assert_called_once_with({
        "email": "ann@example.com",
        "password": "secret123",
        "options": {"data": {"name": "Ann", "role": "student"}},
    })
    assert identity.id == "user-1"


def test_sign_up_auth_error_keeps_message_and_status(supabase_client):
    supabase_client.auth.sign_up.side_effect = AuthApiError("User already registered", 422, "user_already_exists")
    provider = SupabaseIdentityProvider(supabase_client)

    with pytest.raises(ProviderError) as exc:
        provider.sign_up("ann@example.com", "secret123", {})

    assert exc.value.message == "User already registered"
    assert exc.value.status == 422


def test_sign_up_api_error_is_definitive(supabase_client):
    supabase_client.auth.sign_up.side_effect = AuthApiError("Signup requires a valid password", 422, "weak_password")
    provider = SupabaseIdentityProvider(supabase_client)

    with pytest.raises(ProviderError) as exc:
        provider.sign_up("ann@example.com", "123", {})

    assert exc.value.definitive is True


def test_sign_up_timeout_is_not_definitive(supabase_client):
    supabase_client.auth.sign_up.side_effect = httpx.ReadTimeout("The read operation timed out")
    provider = SupabaseIdentityProvider(supabase_client)

    with pytest.raises(ProviderError) as exc:
        provider.sign_up("ann@example.com", "secret123", {})

    assert exc.value.definitive is False
    assert exc.value.status == 500


def test_sign_in_network_error_is_provider_error(supabase_client):
    supabase_client.auth.sign_in_with_password.side_effect = httpx.ConnectError("connection refused")
    provider = SupabaseIdentityProvider(supabase_client)

    with pytest.raises(ProviderError) as exc:
        provider.sign_in("ann@example.com", "secret123")

    assert exc.value.status == 500
    assert "connection refused" in exc.value.message


def test_sign_in_returns_identity(supabase_client):
    supabase_client.auth.sign_in_with_password.return_value = make_auth_response(
        make_user(metadata={"role": "student"}), access_token="jwt",
    )
    provider = SupabaseIdentityProvider(supabase_client)

    identity = provider.sign_in("ann@example.com", "secret123")

    supabase_client.auth.sign_in_with_password.assert_called_once_with(
        {"email": "ann@example.com", "password": "secret123"}
    )
    assert identity.access_token == "jwt"


def test_upload_returns_full_path(supabase_client):
    bucket = supabase_client.storage.from_.return_value
    bucket.upload.return_value = SimpleNamespace(path="abc/image", full_path="headshots/abc/image")
    storage = SupabaseImageStorage(supabase_client, "headshots")

    full_path = storage.upload("abc/image", b"img", "image/jpeg")

    assert full_path == "headshots/abc/image"
    supabase_client.storage.from_.assert_called_with("headshots")
    bucket.upload.assert_called_once_with(
        path="abc/image", file=b"img", file_options={"content-type": "image/jpeg"},
    )


def test_upload_without_full_path_falls_back_to_bucket_path(supabase_client):
    bucket = supabase_client.storage.from_.return_value
    bucket.upload.return_value = SimpleNamespace(status_code=200)
    storage = SupabaseImageStorage(supabase_client, "headshots")

    assert storage.upload("abc/image", b"img", "image/jpeg") == "headshots/abc/image"


def test_upload_storage_error_message(supabase_client):
    bucket = supabase_client.storage.from_.return_value
    bucket.upload.side_effect = StorageException(
        {"statusCode": 413, "error": "Payload too large", "message": "The object exceeded the maximum allowed size"}
    )
    storage = SupabaseImageStorage(supabase_client, "headshots")

    with pytest.raises(StorageError) as exc:
        storage.upload("abc/image", b"img", "image/jpeg")

    assert exc.value.message == "The object exceeded the maximum allowed size"


def test_remove_deletes_object(supabase_client):
    storage = SupabaseImageStorage(supabase_client, "headshots")

    storage.remove("abc/image")

    supabase_client.storage.from_.return_value.remove.assert_called_once_with(["abc/image"])
