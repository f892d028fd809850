from datetime import timedelta

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.notifiers import build_notifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notifier import INotifier
from src.app.services.password_hasher import IPasswordHasher

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

_notifier = build_notifier(ApplicationConfig)
_password_hasher = BcryptPasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notifier() -> INotifier:
    return _notifier


def get_password_hasher() -> IPasswordHasher:
    return _password_hasher


def get_recovery_window() -> timedelta:
    return timedelta(seconds=ApplicationConfig.RECOVERY_WINDOW_SECONDS)
