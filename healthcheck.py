import sys

import httpx
from sqlalchemy import inspect, text

from academy_dashboard.config import settings
from academy_dashboard.db import Base, engine
import academy_dashboard.models  # noqa: F401


GREEN = '\033[32m'
RED = '\033[31m'
RESET = '\033[0m'


def run_check(name, fn):
    try:
        message = fn() or ''
        suffix = f' - {message}' if message else ''
        print(f'{GREEN}PASS{RESET} {name}{suffix}')
        return True
    except Exception as exc:
        print(f'{RED}FAIL{RESET} {name} - {exc}')
        return False


def check_db_connectivity():
    with engine.connect() as conn:
        conn.execute(text('SELECT 1'))
    return 'connect ok'


def check_tables_present():
    existing = set(inspect(engine).get_table_names())
    missing = sorted(set(Base.metadata.tables) - existing)
    if missing:
        raise RuntimeError(f'missing tables: {", ".join(missing)}')
    return f'{len(existing)} tables'


def check_http_health():
    res = httpx.get(f'{settings.health_base_url.rstrip("/")}/health', timeout=8)
    res.raise_for_status()
    return f'status={res.json().get("status")}'


def main():
    checks = [
        ('database connectivity', check_db_connectivity),
        ('schema tables', check_tables_present),
        ('http /health', check_http_health),
    ]
    results = [run_check(name, fn) for name, fn in checks]
    return 0 if all(results) else 1


if __name__ == '__main__':
    sys.exit(main())
