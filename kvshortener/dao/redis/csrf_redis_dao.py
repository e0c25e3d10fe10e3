from beartype import beartype

from kvshortener.dao.base import CSRFBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error


class CSRFRedisDAO(RedisClientMixin, CSRFBaseDAO):
    """Redis-based DAO for per-user CSRF tokens stored under csrf:<username>

    Methods:
        get(username: str, **kwargs) -> str | None:
            GET the current token.

        set_if_absent(username: str, token: str, ttl: int, **kwargs) -> str:
            SET NX EX + GET inside one MULTI/EXEC transaction.
    """

    @handle_redis_connection_error
    @beartype
    def get(self, username: str, **kwargs) -> str | None:
        return self.redis.get(self.keys.csrf_key(username))

    @handle_redis_connection_error
    @beartype
    def set_if_absent(self, username: str, token: str, ttl: int, **kwargs) -> str:
        """Store a new token unless the user already has one

        NOTE: SET NX and GET run as one transaction so the caller always
              receives the token which is actually stored. When two requests
              race to issue a token for the same user, the loser gets the
              winner's token instead of its own (never persisted) one:

              (request 1): GET csrf:<user> => nil
              (request 2): GET csrf:<user> => nil
              (request 1): MULTI; SET csrf:<user> <token 1> NX EX <ttl>; GET csrf:<user>; EXEC => <token 1>
              (request 2): MULTI; SET csrf:<user> <token 2> NX EX <ttl>; GET csrf:<user>; EXEC => <token 1>

        Returns:
            str:
                The token stored after the call.
        """
        csrf_key = self.keys.csrf_key(username)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(csrf_key, token, nx=True, ex=ttl)
            pipe.get(csrf_key)
            _, stored = pipe.execute()
        return stored
