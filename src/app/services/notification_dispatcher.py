from abc import ABC, abstractmethod


class INotificationDispatcher(ABC):
    """Out-of-band delivery of one-time codes - application layer"""

    @abstractmethod
    async def send(self, address: str, code: str) -> bool:
        """
        Deliver a code to an address.

        Returns:
            True if the provider accepted the message. Never raises for
            delivery problems.
        """
        pass
