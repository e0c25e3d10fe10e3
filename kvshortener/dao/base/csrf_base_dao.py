from abc import ABC, abstractmethod


class CSRFBaseDAO(ABC):
    """Interface for per-user CSRF token data access objects (DAOs)

    At most one token is stored per username, with an expiry.

    Methods:
        get(username: str, **kwargs) -> str | None:
            Return the latest stored token, or None if absent or expired.
            Raises DataStoreError on read failure.

        set_if_absent(username: str, token: str, ttl: int, **kwargs) -> str:
            Atomically store the token unless one already exists and return
            whichever token is stored afterwards.
            Raises DataStoreError on write failure.
    """

    @abstractmethod
    def get(self, username: str, **kwargs) -> str | None:
        pass

    @abstractmethod
    def set_if_absent(self, username: str, token: str, ttl: int, **kwargs) -> str:
        pass
