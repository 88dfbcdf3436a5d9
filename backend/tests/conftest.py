"""
Test fixtures for the ReviewDesk backend.

The environment is set before ``reviewdesk`` is imported so the settings
object, the engine and the app all see the in-memory test database.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_EMAILS"] = "Boss@ReviewDesk.dev, ops@reviewdesk.dev"
os.environ["PROFILE_AUTOCREATE"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from reviewdesk.core.security import create_access_token, get_password_hash  # noqa: E402
from reviewdesk.db.base import Base  # noqa: E402
from reviewdesk.db.session import SessionLocal, engine  # noqa: E402
from reviewdesk.main import app, build_rate_limiters  # noqa: E402
from reviewdesk.models import Profile, Resume, Reviewer, User  # noqa: E402
from reviewdesk.services.social import normalize_social_link  # noqa: E402

TEST_PASSWORD = "Str0ng!pass"
_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
def db():
    """Fresh schema per test; everything a test creates must be committed."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.state.rate_limiters = build_rate_limiters()
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    """Factory creating an identity, optionally with a profile role."""
    counter = {"n": 0}

    def _make(
        email: Optional[str] = None,
        role: Optional[str] = "user",
        with_profile: bool = True,
        full_name: Optional[str] = None,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            hashed_password=_PASSWORD_HASH,
            full_name=full_name,
            user_metadata={},
        )
        db.add(user)
        db.commit()
        if with_profile:
            db.add(Profile(id=user.id, role=role, onboarded=False))
            db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_reviewer(db, make_user):
    """Factory creating a reviewer identity plus its reviewer record."""

    def _make(slug: str, social_link: Optional[str] = None, **fields) -> tuple[User, Reviewer]:
        user = make_user(role="reviewer", full_name=fields.pop("full_name", None))
        link = social_link or f"https://linkedin.com/in/{slug}"
        reviewer = Reviewer(
            user_id=user.id,
            slug=slug,
            display_name=fields.pop("display_name", slug),
            expertise=fields.pop("expertise", ["Software"]),
            social_link=link,
            social_link_key=normalize_social_link(link),
            **fields,
        )
        db.add(reviewer)
        db.commit()
        db.refresh(reviewer)
        return user, reviewer

    return _make


@pytest.fixture
def make_resume(db):
    def _make(owner: User, reviewer_slug: Optional[str] = None, **fields) -> Resume:
        resume = Resume(
            user_id=owner.id,
            file_url=fields.pop("file_url", "https://storage.example.com/r.pdf"),
            reviewer_slug=reviewer_slug,
            **fields,
        )
        db.add(resume)
        db.commit()
        db.refresh(resume)
        return resume

    return _make


def token_for(user: User) -> str:
    return create_access_token(data={"sub": user.id})


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def headers():
    return auth_headers
