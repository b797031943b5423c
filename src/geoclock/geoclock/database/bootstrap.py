from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..employees.memory_employee_repository import InMemoryEmployeeRepository
from ..employees.model import Employee, role_from_kind
from ..sites.memory_site_repository import InMemorySiteRepository
from ..sites.model import SiteConfig

logger = logging.getLogger(__name__)

# (site_id, name, latitude, longitude, radius_m)
DEMO_SITES = [
    ("HQ", "Head office", 13.75, 100.50, 200.0),
    ("WH2", "Warehouse 2", 13.80, 100.55, 150.0),
]

# (employee_id, password, display_name, role, site_id, position)
DEMO_EMPLOYEES = [
    ("somchai", "staff123", "Somchai Jaidee", "Fixed", "HQ", "Storekeeper"),
    ("nok", "staff123", "Nok Srisuk", "Roaming", None, "Field technician"),
    ("manee", "super123", "Manee Rakdee", "Supervisor", "HQ", "Site supervisor"),
    ("preecha", "super123", "Preecha Boonmee", "Supervisor", "WH2", "Warehouse supervisor"),
]


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "geoclock_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal splitter: ';' ends a statement unless quoted; '--' comments are dropped.
    buf: list[str] = []
    quote = ""

    for line in sql.splitlines():
        if not quote and line.strip().startswith("--"):
            continue
        for ch in line:
            if quote:
                buf.append(ch)
                if ch == quote:
                    quote = ""
                continue
            if ch in ("'", '"'):
                quote = ch
                buf.append(ch)
                continue
            if ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)
        buf.append("\n")

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_data(db_config: dict) -> None:
    """Upsert the demo sites and employees (passwords hashed on the way in)."""
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for site_id, name, lat, lng, radius in DEMO_SITES:
            cur.execute(
                """
                INSERT INTO site_config (site_id, site_name, latitude, longitude, radius_m)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE site_name=VALUES(site_name), latitude=VALUES(latitude),
                    longitude=VALUES(longitude), radius_m=VALUES(radius_m)
                """,
                (site_id, name, lat, lng, radius),
            )
        for employee_id, password, name, role, site_id, position in DEMO_EMPLOYEES:
            cur.execute(
                """
                INSERT INTO employees (employee_id, credential_hash, display_name, role, site_id, position)
                VALUES (%s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE credential_hash=VALUES(credential_hash), display_name=VALUES(display_name),
                    role=VALUES(role), site_id=VALUES(site_id), position=VALUES(position), is_active=1
                """,
                (employee_id, generate_password_hash(password), name, role, site_id, position),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("demo data ready (%d sites, %d employees)", len(DEMO_SITES), len(DEMO_EMPLOYEES))


def seed_in_memory(employees: InMemoryEmployeeRepository, sites: InMemorySiteRepository) -> None:
    for site_id, name, lat, lng, radius in DEMO_SITES:
        sites.put(SiteConfig(site_id=site_id, name=name, latitude=lat, longitude=lng, radius_m=radius))
    for employee_id, password, name, role, site_id, position in DEMO_EMPLOYEES:
        employees.put(
            Employee(
                employee_id=employee_id,
                display_name=name,
                role=role_from_kind(role, site_id),
                position=position,
                credential_hash=generate_password_hash(password),
            )
        )


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
