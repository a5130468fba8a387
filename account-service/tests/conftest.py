import pytest
import os
import sys
from types import SimpleNamespace
from unittest.mock import MagicMock

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

# Настройки читаются при импорте account_service.config
os.environ["DATABASE_URL"] = "sqlite:///./test_accounts.db"
os.environ["REDIS_URL"] = "redis://localhost:6379/99"
os.environ["SUPABASE_URL"] = "https://test.supabase.co"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["STORAGE_URL"] = "https://test.supabase.co/storage/v1/object/public/"

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from account_service.infrastructure.models import Base


@pytest.fixture
def engine():
    """Чистая SQLite в памяти на каждый тест"""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(user_id="user-1", email="student@example.com", metadata=None, identities=1):
    """Объект пользователя в форме ответа supabase auth"""
    return SimpleNamespace(
        id=user_id,
        email=email,
        user_metadata=metadata if metadata is not None else {},
        identities=[SimpleNamespace(id=f"identity-{i}") for i in range(identities)]
        if identities is not None else None,
    )


def make_auth_response(user, access_token="access-token"):
    session = SimpleNamespace(access_token=access_token) if access_token else None
    return SimpleNamespace(user=user, session=session)


@pytest.fixture
def supabase_client():
    """Мок клиента supabase"""
    client = MagicMock()
    client.auth.sign_up = MagicMock()
    client.auth.sign_in_with_password = MagicMock()
    return client
