"""Abstract base class for per-client request counter DAOs.

Counters live for a fixed window which starts with the first request of a
client. Once the window expires the counter disappears and the next request
starts a new window.
"""

from abc import ABC, abstractmethod

from kvshortener.models import RateLockModel


class RateLimitBaseDAO(ABC):
    """Interface for per-client request counter data access objects (DAOs)

    Methods:
        hit(client_key: str, window_seconds: int, **kwargs) -> int:
            Increment the client's counter and return the new value.
            A counter created by this call expires after window_seconds.
            Raises DataStoreError on write failure.

        locks(**kwargs) -> list[RateLockModel]:
            List every live client counter with its remaining TTL.
            Raises DataStoreError on read failure.
    """

    @abstractmethod
    def hit(self, client_key: str, window_seconds: int, **kwargs) -> int:
        pass

    @abstractmethod
    def locks(self, **kwargs) -> list[RateLockModel]:
        pass
