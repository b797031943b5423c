from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from ..core.enums import RoleKind


@dataclass(frozen=True)
class FixedSite:
    """Attendance constrained to the geofence of one site."""

    site_id: str
    kind: ClassVar[RoleKind] = RoleKind.FIXED


@dataclass(frozen=True)
class Roaming:
    """Exempt from geofence checks; the home site is informational only."""

    site_id: Optional[str] = None
    kind: ClassVar[RoleKind] = RoleKind.ROAMING


@dataclass(frozen=True)
class Supervisor:
    site_id: str
    kind: ClassVar[RoleKind] = RoleKind.SUPERVISOR


EmployeeRole = Union[FixedSite, Roaming, Supervisor]


def role_from_kind(kind: RoleKind, site_id: Optional[str]) -> EmployeeRole:
    kind = RoleKind(kind)
    if kind == RoleKind.ROAMING:
        return Roaming(site_id or None)
    if not site_id:
        raise ValueError(f"{kind.value} employees need a site id")
    if kind == RoleKind.FIXED:
        return FixedSite(site_id)
    return Supervisor(site_id)


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee (reference data, read-only to the core)."""

    employee_id: str
    display_name: str
    role: EmployeeRole
    position: str = ""
    credential_hash: str = ""
    is_active: bool = True

    @property
    def site_id(self) -> Optional[str]:
        return self.role.site_id
