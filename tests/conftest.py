import os

# Settings are read on import of meritjournal modules
os.environ["MERITJOURNAL_DB_URI"] = "sqlite://"
os.environ["MERITJOURNAL_AUTH_DISABLED"] = "false"
os.environ.setdefault(
    "MERITJOURNAL_JWT_SECRET", "merit-journal-test-secret-0123456789"
)

from typing import Dict, Optional

import jwt
import pytest
from fastapi.testclient import TestClient

from meritjournal import db
from meritjournal.entries.models import Base
from meritjournal.entries.repositories import UnitOfWork
from meritjournal.utils.settings import MERITJOURNAL_JWT_SECRET

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def make_token(
    user_id: Optional[str] = USER_ID, secret: str = MERITJOURNAL_JWT_SECRET
) -> str:
    claims = {}
    if user_id is not None:
        claims["sub"] = user_id
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user_id: str = USER_ID) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def tables():
    Base.metadata.create_all(bind=db.engine)
    yield
    Base.metadata.drop_all(bind=db.engine)


@pytest.fixture
def db_session(tables):
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def unit_of_work(db_session) -> UnitOfWork:
    return UnitOfWork(db_session)


@pytest.fixture
def client(tables):
    from meritjournal.api import app

    with TestClient(app) as test_client:
        yield test_client
