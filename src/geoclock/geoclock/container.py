from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .core.constants import (
    DEFAULT_MAX_ACCURACY_M,
    DEFAULT_RECENT_SESSIONS,
    DEFAULT_SITE_RADIUS_M,
    DEFAULT_TIMEZONE,
    DEFAULT_VISIBLE_REQUESTS,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.memory_employee_repository import InMemoryEmployeeRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeDirectory
from .overtime.memory_overtime_repository import InMemoryOvertimeRepository
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeService
from .router.router import RequestRouter
from .sites.geofence import GeofenceValidator
from .sites.memory_site_repository import InMemorySiteRepository
from .sites.mysql_site_repository import MySQLSiteRepository
from .sites.repository import SiteRepository

BACKEND_MYSQL = "mysql"
BACKEND_MEMORY = "memory"


@dataclass(frozen=True)
class Container:
    tz: ZoneInfo
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    sites_repo: SiteRepository
    attendance_repo: AttendanceRepository
    overtime_repo: OvertimeRepository

    directory: EmployeeDirectory
    auth_service: AuthService
    geofence: GeofenceValidator
    ledger: AttendanceLedger
    overtime_service: OvertimeService
    router: RequestRouter


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: str = BACKEND_MYSQL,
    timezone: str = DEFAULT_TIMEZONE,
    default_radius_m: float = DEFAULT_SITE_RADIUS_M,
    max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M,
    geofence_on_clock_out: bool = True,
    recent_limit: int = DEFAULT_RECENT_SESSIONS,
    visible_limit: int = DEFAULT_VISIBLE_REQUESTS,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    tz = ZoneInfo(timezone)
    conn: Optional[DatabaseConnection] = None

    if backend == BACKEND_MEMORY:
        employees_repo = InMemoryEmployeeRepository()
        sites_repo = InMemorySiteRepository()
        attendance_repo = InMemoryAttendanceRepository()
        overtime_repo = InMemoryOvertimeRepository()
    elif backend == BACKEND_MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        config = DBConfig(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", 5)),
            lock_wait_timeout=int(db_config.get("lock_wait_timeout", 5)),
        )
        conn = DatabaseConnection.get_instance(config)
        employees_repo = MySQLEmployeeRepository(conn)
        sites_repo = MySQLSiteRepository(conn, default_radius_m=default_radius_m)
        attendance_repo = MySQLAttendanceRepository(conn, tz=tz)
        overtime_repo = MySQLOvertimeRepository(conn, tz=tz)
    else:
        raise ValueError(f"Unknown storage backend: {backend!r}")

    directory = EmployeeDirectory(employees_repo)
    auth_service = AuthService(employees_repo)
    geofence = GeofenceValidator(sites_repo, max_accuracy_m=max_accuracy_m)
    ledger = AttendanceLedger(
        attendance_repo,
        directory,
        geofence,
        tz=tz,
        geofence_on_clock_out=geofence_on_clock_out,
        recent_limit=recent_limit,
        clock=clock,
    )
    overtime_service = OvertimeService(overtime_repo, tz=tz, visible_limit=visible_limit, clock=clock)
    router = RequestRouter(
        auth=auth_service,
        directory=directory,
        ledger=ledger,
        overtime=overtime_service,
        tz=tz,
    )

    return Container(
        tz=tz,
        conn=conn,
        employees_repo=employees_repo,
        sites_repo=sites_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        directory=directory,
        auth_service=auth_service,
        geofence=geofence,
        ledger=ledger,
        overtime_service=overtime_service,
        router=router,
    )
