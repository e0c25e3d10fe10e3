from kvshortener.dao.base.short_url_base_dao import ShortURLBaseDAO
from kvshortener.dao.base.user_base_dao import UserBaseDAO
from kvshortener.dao.base.session_base_dao import SessionBaseDAO
from kvshortener.dao.base.csrf_base_dao import CSRFBaseDAO
from kvshortener.dao.base.rate_limit_base_dao import RateLimitBaseDAO


__all__ = [
    'ShortURLBaseDAO',
    'UserBaseDAO',
    'SessionBaseDAO',
    'CSRFBaseDAO',
    'RateLimitBaseDAO',
]
