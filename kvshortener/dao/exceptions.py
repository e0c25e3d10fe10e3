"""Exceptions related to Data Access Objects (DAO) operations.

DAO exceptions also derive from the matching application error kind
(see kvshortener.exceptions), so handlers can translate any of them into
an HTTP status without knowing about the data store.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when a short link is not found in the data store.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    UserDoesNotExistError:
        Raised when an admin user is not found in the data store.

Example:
    >>> from kvshortener.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError("Short URL with code 'abc' not found.")
    Traceback (most recent call last):
        ...
    kvshortener.dao.exceptions.ShortURLNotFoundError: Short URL with code 'abc' not found.
"""

from kvshortener.exceptions import KVShortenerError, NotFoundError, StoreUnavailableError


class DAOError(KVShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError, NotFoundError):
    """Exception raised when a short link is not found in the data store."""

    error_code = 'dao:short_url_not_found_error'


class DataStoreError(DAOError, StoreUnavailableError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'


class UserDoesNotExistError(DAOError, NotFoundError):
    """Exception raised when an admin user is not found in the data store."""

    error_code = 'dao:user_does_not_exist_error'
