from abc import ABC, abstractmethod

from libs.result import Result


class INotificationDispatcher(ABC):
    """Out-of-band delivery of password reset links"""

    @abstractmethod
    async def send(self, to_address: str, reset_link: str) -> Result[None]:
        """Deliver the reset link; DISPATCH_FAILURE when delivery gave up"""
        pass
