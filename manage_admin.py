#!/usr/bin/env python3
"""
Create admin users or reset their passwords.

This script follows this procedure:
- Step 1: Load the Redis connection options from a configuration document
- Step 2: Generate a random password and store its bcrypt hash under user:<name>
- Step 3: Print the password (it can't be retrieved afterwards)

CLI usage:
    $ python manage_admin.py admin
    $ python manage_admin.py admin --config config/local.json --function admin_login
    $ python manage_admin.py admin --redis-host localhost --redis-port 6379 --app-name kvshortener --env local

Behavior:
    - The configuration document has the same shape as the one the Lambda
      functions load ({"configs": {"<function>": {"redis": {...}}}}). JSON and
      YAML documents are both accepted.
    - --redis-* options override values read from the document.
    - Keys are prefixed with <app name>:<env> when --app-name is given, the same
      way the Lambda functions prefix them with APP_NAME and APP_ENV.
    - Re-running the script for an existing user replaces the password.

Raises:
    FileNotFoundError: If the --config file does not exist.
    BadConfigurationError: If the document lacks the function's section or has invalid values.
    ValidationError: If the username is invalid.
    DataStoreError: If Redis can't be reached.
"""

import sys
import argparse
import pathlib
from typing import Any

import yaml

from kvshortener.dao.redis import UserRedisDAO
from kvshortener.exceptions import KVShortenerError
from kvshortener.services import create_or_update_admin
from kvshortener.utils import AppSettings


def _load_document(path: pathlib.Path) -> dict[str, Any]:
    """Load a JSON/YAML configuration document (empty dict for empty files)."""
    with path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return data or {}


def _redis_options(args: argparse.Namespace) -> dict[str, Any]:
    section: dict[str, Any] = {'redis': {}}
    if args.config:
        document = _load_document(pathlib.Path(args.config).expanduser())
        section = (document.get('configs') or {}).get(args.function) or section

    overrides = {
        'host': args.redis_host,
        'port': args.redis_port,
        'db': args.redis_db,
        'username': args.redis_username,
        'password': args.redis_password,
    }
    redis_section = dict(section.get('redis') or {})
    redis_section.update({k: v for k, v in overrides.items() if v is not None})
    return AppSettings.from_config({**section, 'redis': redis_section}).redis_config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog='manage_admin.py',
        description='Create an admin user or reset its password (printed once)',
    )
    parser.add_argument('username', help='Admin username ([A-Za-z0-9_.-], up to 64 characters)')
    parser.add_argument('--config', help='JSON/YAML configuration document to read Redis options from')
    parser.add_argument('--function', default='admin_login', help="Configuration section to use (default: 'admin_login')")
    parser.add_argument('--app-name', help='Application name used as key prefix (as APP_NAME)')
    parser.add_argument('--env', default='local', help="Application environment used as key prefix (as APP_ENV, default: 'local')")
    parser.add_argument('--redis-host')
    parser.add_argument('--redis-port', type=int)
    parser.add_argument('--redis-db', type=int)
    parser.add_argument('--redis-username')
    parser.add_argument('--redis-password')
    args = parser.parse_args(argv)

    prefix = f'{args.app_name}:{args.env.lower()}' if args.app_name else None
    try:
        user_dao = UserRedisDAO(**_redis_options(args), prefix=prefix)
        password, created = create_or_update_admin(user_dao, args.username)
    except KVShortenerError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    action = 'Created' if created else 'Updated'
    print(f"{action} admin user '{args.username}'. Password: {password}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
