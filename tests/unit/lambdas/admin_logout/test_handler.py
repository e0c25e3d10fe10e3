import json
from urllib.parse import urlencode

import pytest
from pytest import MonkeyPatch

from kvshortener.types import LambdaContext, LambdaConfiguration
from kvshortener.lambdas.admin_logout import app
from kvshortener.services import CSRFGuard


class TestAdminLogoutHandler:

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        make_event,
        user_dao,
        session_dao,
        csrf_dao,
    ) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'UserRedisDAO', lambda *a, **kw: user_dao)
        monkeypatch.setattr(app, 'SessionRedisDAO', lambda *a, **kw: session_dao)
        monkeypatch.setattr(app, 'CSRFRedisDAO', lambda *a, **kw: csrf_dao)

        session_dao.add('admin', 'browser-1')
        session_dao.add('admin', 'browser-2')
        self.csrf_token = CSRFGuard(csrf_dao).issue('admin')
        self.context = context
        self.make_event = make_event
        self.session_dao = session_dao

    def _post(self, cookie: str | None, **params):
        return app.lambda_handler(self.make_event('POST', cookie=cookie, body=urlencode(params)), self.context)

    def test_lambda_handler(self) -> None:
        response = self._post('admin::browser-1', csrftoken=self.csrf_token)

        assert response['statusCode'] == 302
        assert response['headers']['Location'] == '/admin/login/'
        assert 'Max-Age=0' in response['multiValueHeaders']['Set-Cookie'][0]
        # Only the requesting browser is logged out
        assert self.session_dao.sessions == {'admin': {'browser-2'}}

    def test_lambda_handler_with_invalid_csrf_token(self) -> None:
        response = self._post('admin::browser-1', csrftoken='forged')

        assert response['statusCode'] == 403
        assert json.loads(response['body'])['message'] == 'Forbidden (invalid csrf token)'
        assert self.session_dao.sessions == {'admin': {'browser-1', 'browser-2'}}

    @pytest.mark.parametrize('cookie', [None, 'admin::unknown'])
    def test_lambda_handler_anonymous(self, cookie: str | None) -> None:
        response = self._post(cookie, csrftoken=self.csrf_token)

        assert response['statusCode'] == 302
        assert response['headers']['Location'] == '/admin/login/'
        assert self.session_dao.sessions == {'admin': {'browser-1', 'browser-2'}}

    def test_lambda_handler_with_malformed_cookie(self) -> None:
        response = self._post('admin', csrftoken=self.csrf_token)

        assert response['statusCode'] == 400
        assert 'Max-Age=0' in response['multiValueHeaders']['Set-Cookie'][0]

    def test_lambda_handler_get_not_allowed(self) -> None:
        response = app.lambda_handler(self.make_event('GET', cookie='admin::browser-1'), self.context)

        assert response['statusCode'] == 405
        assert response['headers']['Allow'] == 'POST'
        assert self.session_dao.sessions == {'admin': {'browser-1', 'browser-2'}}
