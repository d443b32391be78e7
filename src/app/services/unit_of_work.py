from abc import ABC, abstractmethod

from libs.result import Result
from src.app.repositories.account_repository import IAccountRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    accounts: IAccountRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self) -> Result[None]:
        pass

    @abstractmethod
    async def rollback(self):
        pass
