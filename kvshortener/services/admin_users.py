"""Admin user management

Admin passwords are never chosen by humans: every create/update generates
TokenSize.PASSWORD random bytes and hands their hex form to the operator
exactly once. Only the bcrypt hash is persisted.

Functions:
    validate_username(username) -> str
    create_or_update_admin(user_dao, username) -> tuple[str, bool]
    check_password(user_dao, username, password) -> bool
"""

import re
import logging
import secrets

import bcrypt

from kvshortener.constants import TokenSize
from kvshortener.dao.base import UserBaseDAO
from kvshortener.dao.exceptions import UserDoesNotExistError
from kvshortener.exceptions import ValidationError


logger = logging.getLogger(__name__)

# Restricted to cookie-safe characters, which also excludes the session separator
USERNAME_PATTERN = re.compile(r'[A-Za-z0-9_.-]{1,64}')

# Checked for unknown users so the response time doesn't reveal whether a user exists
_DUMMY_HASH = bcrypt.hashpw(b'\x00' * TokenSize.PASSWORD, bcrypt.gensalt())


def validate_username(username: str) -> str:
    if not isinstance(username, str) or not USERNAME_PATTERN.fullmatch(username):
        raise ValidationError('invalid username')
    return username


def create_or_update_admin(user_dao: UserBaseDAO, username: str) -> tuple[str, bool]:
    """Create an admin user, or reset the password of an existing one

    Returns:
        tuple[str, bool]: the hex-encoded password (shown once) and whether the user was created.

    Raises:
        ValidationError: if the username is invalid.
        DataStoreError: if the user can't be stored.

    Example:
        >>> password, created = create_or_update_admin(UserRedisDAO(), 'admin')
        >>> len(password), created
        (24, True)
    """
    validate_username(username)
    password = secrets.token_bytes(TokenSize.PASSWORD)
    password_hash = bcrypt.hashpw(password, bcrypt.gensalt()).decode('ascii')
    created = user_dao.set_password_hash(username, password_hash)
    logger.info('Stored admin user.', extra={'username': username, 'created': created})
    return password.hex(), created


def _decode_password(password: str | None) -> bytes | None:
    try:
        raw = bytes.fromhex(password or '')
    except ValueError:
        return None
    return raw if len(raw) == TokenSize.PASSWORD else None


def check_password(user_dao: UserBaseDAO, username: str, password: str | None) -> bool:
    """Verify an admin's password

    Unknown users, invalid usernames and malformed passwords all return
    False after a bcrypt comparison of comparable cost.

    Raises:
        DataStoreError: if the user's hash can't be read.
    """
    stored_hash = None
    if isinstance(username, str) and USERNAME_PATTERN.fullmatch(username):
        try:
            stored_hash = user_dao.password_hash(username).encode('ascii')
        except UserDoesNotExistError:
            logger.debug('Login attempt for unknown admin user.', extra={'username': username})

    raw = _decode_password(password)
    matches = bcrypt.checkpw(raw or b'', stored_hash or _DUMMY_HASH)
    return matches and stored_hash is not None and raw is not None
