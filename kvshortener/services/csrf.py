"""Per-user anti-forgery tokens

One token is stored per username with an expiry. Issuing returns the stored
token while it is alive and atomically stores a fresh one otherwise. Tokens are
always verified against the value currently held by the store.
"""

import hmac
import secrets

from kvshortener.constants import TokenSize, Defaults
from kvshortener.dao.base import CSRFBaseDAO


# Compared against when no token is stored, so verification never short-circuits
_MISSING_TOKEN = 'not found'


class CSRFGuard:
    """Issue and verify CSRF tokens

    Attributes:
        dao (CSRFBaseDAO): Store of per-user tokens.
        timeout (int): Token lifetime in seconds.
    """

    def __init__(self, dao: CSRFBaseDAO, timeout: int = Defaults.CSRF_TIMEOUT):
        self.dao = dao
        self.timeout = timeout

    def issue(self, username: str) -> str:
        """Return the user's live token, creating one when none is stored

        Raises:
            DataStoreError: on store failure.
        """
        token = self.dao.get(username)
        if token is not None:
            return token
        return self.dao.set_if_absent(username, secrets.token_hex(TokenSize.CSRF), self.timeout)

    def verify(self, username: str, supplied_token: str | None) -> bool:
        """Check a supplied token against the user's latest stored one in constant time

        Raises:
            DataStoreError: on store failure.
        """
        stored = self.dao.get(username) or _MISSING_TOKEN
        supplied = supplied_token or ''
        matches = hmac.compare_digest(stored.encode('utf-8'), supplied.encode('utf-8'))
        return matches and stored is not _MISSING_TOKEN
