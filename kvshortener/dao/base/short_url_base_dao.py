"""Abstract base class for short link data access objects (DAOs).

This class establishes a consistent contract for all short link DAO implementations,
regardless of the underlying storage mechanism.

Responsibilities:
    - Provide an interface for inserting and retrieving ShortLinkModel objects.
    - Expose the global link counter, incremented atomically by the data store.
    - Enumerate stored links for administrative export.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from kvshortener.models import ShortLinkModel
        >>> from kvshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)
        >>> link_id = dao.count(increment=True)
        >>> dao.insert(ShortLinkModel(code='1', target='https://example.com/a', link_id=link_id))

        >>> dao.get('1').target
        'https://example.com/a'

NOTE:
    - Links are never deleted. The DAO does not provide a deletion interface.
"""

from abc import ABC, abstractmethod

from kvshortener.models import ShortLinkModel


class ShortURLBaseDAO(ABC):
    """Interface for short link data access objects (DAOs).

    Methods:
        insert(link: ShortLinkModel, **kwargs) -> ShortURLBaseDAO:
            Store (or overwrite) the code -> target mapping.
            Raises DataStoreError on connection or write failure.

        get(code: str, **kwargs) -> ShortLinkModel:
            Retrieve a ShortLinkModel from the data store by short code.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        count(increment: bool, **kwargs) -> int:
            Return counter from data store.
            Optionally increment counter atomically before retrieving.
            Raises DataStoreError on connection or read failure.

        scan(**kwargs) -> list[ShortLinkModel]:
            List all stored links in no particular order.
            Raises DataStoreError on connection or read failure.
    """

    @abstractmethod
    def insert(self, link: ShortLinkModel, **kwargs) -> 'ShortURLBaseDAO':
        """Store a short link mapping.

        Codes are never reused, so an existing mapping is overwritten without checks.

        Args:
            link (ShortLinkModel):
                The ShortLinkModel instance to be stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, code: str, **kwargs) -> ShortLinkModel:
        """Retrieve a ShortLinkModel from the data store by its short code.

        Args:
            code (str):
                The short code of the link to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The stored link.

        Raises:
            ShortURLNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current counter value from the data store.

        Args:
            increment (bool):
                If True, atomically increment the counter by 1 and return the new value.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The current counter value (0 if no link was ever issued).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def scan(self, **kwargs) -> list[ShortLinkModel]:
        """List every stored link in no particular order.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
