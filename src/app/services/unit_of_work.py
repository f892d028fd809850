from abc import ABC, abstractmethod

from src.app.repositories.recovery_record_repository import IRecoveryRecordRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    recovery_records: IRecoveryRecordRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
