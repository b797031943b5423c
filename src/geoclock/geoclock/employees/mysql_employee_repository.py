from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import RoleKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Employee, role_from_kind
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, credential_hash, display_name, role, site_id, position, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return _to_employee(row)


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=str(row["employee_id"]),
        display_name=row["display_name"],
        role=role_from_kind(RoleKind(row["role"]), row.get("site_id")),
        position=row.get("position") or "",
        credential_hash=row.get("credential_hash") or "",
        is_active=bool(row.get("is_active", True)),
    )
