from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..common.geo import GeoPoint, distance_between
from ..core.constants import DEFAULT_MAX_ACCURACY_M
from ..core.exceptions import DomainError, OutOfRangeError, SiteConfigMissingError, WeakSignalError
from ..employees.model import Employee, FixedSite
from .repository import SiteRepository

logger = logging.getLogger(__name__)

REASON_WEAK_SIGNAL = "signal too weak"
REASON_SITE_MISSING = "site configuration not found"
REASON_OUT_OF_RANGE = "out of range"


@dataclass(frozen=True)
class GeofenceDecision:
    allowed: bool
    reason: Optional[str] = None
    distance_m: Optional[float] = None
    radius_m: Optional[float] = None

    @classmethod
    def allow(cls, *, distance_m: Optional[float] = None, radius_m: Optional[float] = None) -> "GeofenceDecision":
        return cls(allowed=True, distance_m=distance_m, radius_m=radius_m)

    @classmethod
    def deny(cls, reason: str, *, distance_m: Optional[float] = None, radius_m: Optional[float] = None) -> "GeofenceDecision":
        return cls(allowed=False, reason=reason, distance_m=distance_m, radius_m=radius_m)

    def to_error(self) -> DomainError:
        if self.reason == REASON_WEAK_SIGNAL:
            return WeakSignalError()
        if self.reason == REASON_SITE_MISSING:
            return SiteConfigMissingError()
        return OutOfRangeError(self.distance_m if self.distance_m is not None else math.nan, self.radius_m or 0.0)


class GeofenceValidator:
    """Decide whether a device fix is acceptable for an employee.

    Order matters: the accuracy check applies to every role and runs first;
    only FixedSite employees are then held to their site's radius.
    """

    def __init__(self, sites: SiteRepository, *, max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M):
        self._sites = sites
        self._max_accuracy_m = float(max_accuracy_m)

    def validate(self, employee: Employee, point: GeoPoint, accuracy: Optional[float] = None) -> GeofenceDecision:
        if accuracy is not None and accuracy > self._max_accuracy_m:
            return GeofenceDecision.deny(REASON_WEAK_SIGNAL)

        role = employee.role
        if not isinstance(role, FixedSite):
            return GeofenceDecision.allow()

        site = self._sites.get_by_id(role.site_id)
        if not site:
            logger.warning("no site config %r for employee %s", role.site_id, employee.employee_id)
            return GeofenceDecision.deny(REASON_SITE_MISSING)

        distance = distance_between(point, site.center)
        # NaN never satisfies the comparison, so it is denied as well.
        if not distance <= site.radius_m:
            return GeofenceDecision.deny(REASON_OUT_OF_RANGE, distance_m=distance, radius_m=site.radius_m)
        return GeofenceDecision.allow(distance_m=distance, radius_m=site.radius_m)

    def enforce(self, employee: Employee, point: GeoPoint, accuracy: Optional[float] = None) -> GeofenceDecision:
        """Like ``validate`` but raises the matching DomainError on denial."""
        decision = self.validate(employee, point, accuracy)
        if not decision.allowed:
            raise decision.to_error()
        return decision
