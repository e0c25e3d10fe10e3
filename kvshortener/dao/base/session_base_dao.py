from abc import ABC, abstractmethod


class SessionBaseDAO(ABC):
    """Interface for admin session data access objects (DAOs)

    Each username maps to a set of session tokens, one per logged-in browser.
    Tokens aren't time-limited by the application.

    Methods:
        add(username: str, token: str, **kwargs) -> None
        remove(username: str, token: str, **kwargs) -> bool
        contains(username: str, token: str, **kwargs) -> bool
        count_by_user(**kwargs) -> dict[str, int]

    All methods raise DataStoreError on data store failures.
    """

    @abstractmethod
    def add(self, username: str, token: str, **kwargs) -> None:
        """Add a session token to the user's set of tokens."""
        pass

    @abstractmethod
    def remove(self, username: str, token: str, **kwargs) -> bool:
        """Remove one session token. Returns True if the token was present."""
        pass

    @abstractmethod
    def contains(self, username: str, token: str, **kwargs) -> bool:
        """Test whether the token belongs to the user's set of tokens."""
        pass

    @abstractmethod
    def count_by_user(self, **kwargs) -> dict[str, int]:
        """Return the number of active session tokens grouped by username."""
        pass
