"""Shared fixtures: in-memory database, fake model client and an HTTP client."""
from __future__ import annotations

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from studio.core.config import get_settings
from studio.db import models  # noqa: F401
from studio.infrastructure.database.base import Base
from studio.infrastructure.database.session import build_engine
from studio.modules.accounts import AccountCreateInput
from studio.modules.accounts.service import AccountService
from studio.modules.generation.assistant import SupportAssistant
from studio.modules.generation.client import GenerationClient

from .fakes import FakeGenAI


@pytest.fixture
def fake_genai() -> FakeGenAI:
    return FakeGenAI()


@pytest.fixture
def generation_client(fake_genai: FakeGenAI) -> GenerationClient:
    return GenerationClient(fake_genai, get_settings().generation)


@pytest.fixture
def support_assistant(fake_genai: FakeGenAI) -> SupportAssistant:
    settings = get_settings()
    return SupportAssistant(fake_genai, settings.generation, settings.billing)


@pytest.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def register(session):
    async def _register(username: str = "rahim", password: str = "secret", name: str = "Rahim Uddin", **extra):
        service = AccountService.with_session(session)
        account = await service.register(
            AccountCreateInput(username=username, password=password, name=name, **extra)
        )
        await session.commit()
        return account

    return _register


@pytest.fixture
async def app(session_factory, generation_client, support_assistant):
    from studio.interfaces.http.deps import get_db_session, get_generation_client, get_support_assistant
    from studio.main import create_app

    application = create_app()

    async def _override_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _override_db
    application.dependency_overrides[get_generation_client] = lambda: generation_client
    application.dependency_overrides[get_support_assistant] = lambda: support_assistant
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http


@pytest.fixture
def auth_headers(client):
    async def _login(username: str, password: str) -> dict[str, str]:
        response = await client.post("/api/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
