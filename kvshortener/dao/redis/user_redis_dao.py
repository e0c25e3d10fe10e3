from beartype import beartype

from kvshortener.dao.base import UserBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error
from kvshortener.dao.exceptions import UserDoesNotExistError


# Hash field holding the password hash under user:<username>
PASSWORD_FIELD = 'password'


class UserRedisDAO(RedisClientMixin, UserBaseDAO):
    """Redis-based DAO for admin users stored as hashes under user:<username>"""

    @handle_redis_connection_error
    @beartype
    def password_hash(self, username: str, **kwargs) -> str:
        password_hash = self.redis.hget(self.keys.user_key(username), PASSWORD_FIELD)
        if password_hash is None:
            raise UserDoesNotExistError(f"User '{username}' does not exist.")
        return password_hash

    @handle_redis_connection_error
    @beartype
    def set_password_hash(self, username: str, password_hash: str, **kwargs) -> bool:
        # HSET returns the number of newly created fields
        created = self.redis.hset(self.keys.user_key(username), PASSWORD_FIELD, password_hash)
        return created == 1
