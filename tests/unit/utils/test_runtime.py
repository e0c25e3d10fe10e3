import pytest

from kvshortener.utils.runtime import running_locally


@pytest.mark.parametrize(
    'app_env, sam_local, expected',
    [
        ('local', None, True),
        ('LOCAL', None, True),
        ('dev', 'true', True),
        ('dev', None, False),
        ('prod', 'false', False),
        (None, None, False),
    ],
)
def test_running_locally(monkeypatch, app_env, sam_local, expected):
    if app_env is None:
        monkeypatch.delenv('APP_ENV', raising=False)
    else:
        monkeypatch.setenv('APP_ENV', app_env)
    if sam_local is None:
        monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    else:
        monkeypatch.setenv('AWS_SAM_LOCAL', sam_local)

    assert running_locally() is expected
