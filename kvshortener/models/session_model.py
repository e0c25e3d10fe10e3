from dataclasses import dataclass

from kvshortener.constants import SESSION_SEPARATOR
from kvshortener.exceptions import ValidationError


@dataclass(frozen=True)
class SessionModel:
    """Represent one authenticated admin session.

    A username may hold several sessions at once (one per browser), each
    identified by its own random token.

    Attributes:
        username (str):
            Name of the authenticated admin user.
        token (str):
            Opaque random session token.

    Example:
        >>> session = SessionModel.from_cookie('admin::s3cr3t')
        >>> session.username
        'admin'
        >>> session.cookie_value
        'admin::s3cr3t'
    """

    username: str
    token: str

    @property
    def cookie_value(self) -> str:
        return f'{self.username}{SESSION_SEPARATOR}{self.token}'

    @classmethod
    def from_cookie(cls, value: str) -> 'SessionModel':
        """Parse a 'username::token' session cookie value

        The value is split on the first separator only.

        Raises:
            ValidationError:
                If the separator is absent or either part is empty.
        """
        username, separator, token = value.partition(SESSION_SEPARATOR)
        if not separator or not username or not token:
            raise ValidationError('Invalid session cookie value.')
        return cls(username=username, token=token)
