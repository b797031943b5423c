from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.geoclock.geoclock.database.bootstrap import DEMO_EMPLOYEES, DEMO_SITES, ensure_demo_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"({len(DEMO_SITES)} sites, {len(DEMO_EMPLOYEES)} employees)"
    )
    for employee_id, password, _, role, site_id, _ in DEMO_EMPLOYEES:
        print(f"  {employee_id:<10} {password:<10} {role:<11} {site_id or '-'}")


if __name__ == "__main__":
    main()
