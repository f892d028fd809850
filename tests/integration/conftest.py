from datetime import datetime
from typing import List, Optional
from uuid import UUID

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notifier import DeliveryResult, INotifier
from src.depends import get_notifier, get_password_hasher, get_unit_of_work
from src.domain.entities import RecoveryKind, User


class FakeNotifier(INotifier):
    """Records deliveries instead of sending them. Set fail=True to simulate an outage."""

    def __init__(self):
        self.fail = False
        self.sent: List[dict] = []

    async def send_recovery_message(
        self, address: str, code: str, kind: RecoveryKind, expires_at: datetime
    ) -> DeliveryResult:
        if self.fail:
            return DeliveryResult(success=False)
        self.sent.append({"address": address, "kind": kind, "code": code})
        return DeliveryResult(success=True)

    def last_code(self, address: str) -> Optional[str]:
        for message in reversed(self.sent):
            if message["address"] == address:
                return message["code"]
        return None


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest_asyncio.fixture
def notifier():
    return FakeNotifier()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def create_user(db_session, hasher, test_data):
    """Insert a user from test_data.json and return its (id, email, username)"""

    async def _create(key: str = "alice") -> tuple[UUID, str, str]:
        data = test_data.user(key)
        answer = data.pop("security_answer", None)
        user = User(
            email=data["email"],
            username=data["username"],
            password_hash=hasher.hash(data["password"]),
            security_question=data.get("security_question"),
            security_answer_hash=hasher.hash(answer.lower()) if answer else None,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user.id, user.email, user.username

    return _create


@pytest_asyncio.fixture
async def client(db_session, notifier, hasher):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_password_hasher] = lambda: hasher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
