"""Admin session management

Per-user state machine:

    Anonymous --(login: valid password)--> Authenticated
    Authenticated --(logout, unknown or missing token)--> Anonymous

A user holds one session token per logged-in browser. Tokens are independent
of each other: logging out in one browser keeps the other sessions alive.
"""

import logging
import secrets

from kvshortener.constants import ANONYMOUS, TokenSize
from kvshortener.models import SessionModel
from kvshortener.dao.base import SessionBaseDAO, UserBaseDAO
from kvshortener.exceptions import UnauthorizedError
from kvshortener.services.admin_users import check_password


logger = logging.getLogger(__name__)


class SessionManager:
    """Issue, validate and revoke admin session tokens

    Attributes:
        session_dao (SessionBaseDAO): Store of per-user session token sets.
        user_dao (UserBaseDAO): Store of admin password hashes.

    Example:
        >>> sessions = SessionManager(SessionRedisDAO(), UserRedisDAO())
        >>> session = sessions.login('admin', password)
        >>> sessions.authenticate(session.cookie_value)
        'admin'
        >>> sessions.logout(session.cookie_value)
        >>> sessions.authenticate(session.cookie_value)
        'anonymous'
    """

    def __init__(self, session_dao: SessionBaseDAO, user_dao: UserBaseDAO):
        self.session_dao = session_dao
        self.user_dao = user_dao

    def login(self, username: str, password: str | None) -> SessionModel:
        """Verify credentials and open a new session

        Raises:
            UnauthorizedError: on unknown user or wrong password (indistinguishable).
            DataStoreError: on store failure.
        """
        if not check_password(self.user_dao, username, password):
            logger.info('Rejected admin login.', extra={'username': username})
            raise UnauthorizedError('Invalid username or password.')

        session = SessionModel(username=username, token=secrets.token_urlsafe(TokenSize.SESSION))
        self.session_dao.add(session.username, session.token)
        logger.info('Admin logged in.', extra={'username': username})
        return session

    def authenticate(self, cookie_value: str | None) -> str:
        """Resolve a session cookie into a username

        Returns:
            str: the username, or ANONYMOUS for missing or revoked sessions.

        Raises:
            ValidationError: if the cookie value is malformed.
            DataStoreError: on store failure.
        """
        if not cookie_value:
            return ANONYMOUS

        session = SessionModel.from_cookie(cookie_value)
        if self.session_dao.contains(session.username, session.token):
            return session.username
        return ANONYMOUS

    def logout(self, cookie_value: str | None) -> bool:
        """Revoke the session of a cookie

        Returns:
            bool: True if an active session was revoked.

        Raises:
            ValidationError: if the cookie value is malformed.
            DataStoreError: on store failure.
        """
        if not cookie_value:
            return False

        session = SessionModel.from_cookie(cookie_value)
        removed = self.session_dao.remove(session.username, session.token)
        logger.info('Admin logged out.', extra={'username': session.username, 'revoked': removed})
        return removed
