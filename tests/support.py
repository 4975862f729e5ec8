"""Shared helpers for tests: an isolated SQLite database and a TestClient wired to it."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import get_db
from app.core.security import generate_access_token, hash_password
from app.main import app
from app.models import Base, ServiceInstance, User, UserInstanceAbility, UserRole

API = settings.API_V1_PREFIX
DEFAULT_PASSWORD = "secret-pass"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with all tables; one shared connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    username: str,
    password: str = DEFAULT_PASSWORD,
    role: UserRole = UserRole.USER,
    is_active: bool = True,
) -> User:
    user = User(
        username=username,
        hashed_password=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_instance(db: Session, name: str = "instance", **kwargs: object) -> ServiceInstance:
    instance = ServiceInstance(name=name, **kwargs)
    db.add(instance)
    db.commit()
    db.refresh(instance)
    return instance


def add_grant(
    db: Session,
    user_id: str,
    instance_id: str,
    can_use: bool = True,
    token: str | None = None,
) -> UserInstanceAbility:
    grant = UserInstanceAbility(
        user_id=user_id,
        instance_id=instance_id,
        token=token or generate_access_token(),
        can_use=can_use,
    )
    db.add(grant)
    db.commit()
    db.refresh(grant)
    return grant


class ApiTestCase(unittest.TestCase):
    """Runs the app against a private in-memory database per test."""

    def setUp(self) -> None:
        self.Session = make_session_factory()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        with self.Session() as db:
            self.admin_id = add_user(db, "admin", role=UserRole.ADMIN).id
            self.alice_id = add_user(db, "alice").id
            self.bob_id = add_user(db, "bob").id

    def tearDown(self) -> None:
        app.dependency_overrides.pop(get_db, None)

    def client(self) -> TestClient:
        return TestClient(app)

    def login(self, username: str, password: str = DEFAULT_PASSWORD) -> TestClient:
        """A TestClient holding a session cookie for ``username``."""
        client = self.client()
        response = client.post(f"{API}/user/login", json={"username": username, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return client
