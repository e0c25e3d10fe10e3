"""Abstract base class for admin user data access objects (DAOs).

Admin users are created or updated out of band (see manage_admin.py), never
through the HTTP surface. Only password hashes are persisted.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from kvshortener.dao.redis import UserRedisDAO
        >>> dao = UserRedisDAO(...)

        >>> dao.set_password_hash('admin', '$2b$12$...')
        True
        >>> dao.password_hash('admin')
        '$2b$12$...'
"""

from abc import ABC, abstractmethod


class UserBaseDAO(ABC):
    """Interface for admin user data access objects (DAOs)

    Methods:
        password_hash(username: str, **kwargs) -> str:
            Retrieve the stored password hash of a user.
            Raises UserDoesNotExistError if the user does not exist.
            Raises DataStoreError on read failure.

        set_password_hash(username: str, password_hash: str, **kwargs) -> bool:
            Create a user or replace the password hash of an existing one.
            Returns True if the user was created.
            Raises DataStoreError on write failure.
    """

    @abstractmethod
    def password_hash(self, username: str, **kwargs) -> str:
        """Retrieve the stored password hash of a user.

        Args:
            username (str):
                Admin username.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            str:
                The user's password hash.

        Raises:
            UserDoesNotExistError:
                If the user does not exist.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def set_password_hash(self, username: str, password_hash: str, **kwargs) -> bool:
        """Create or update a user's password hash.

        Args:
            username (str):
                Admin username.

            password_hash (str):
                Password hash to store.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool:
                True if the user was created, False if it already existed.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
