from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class OvertimeInterval:
    start_at: datetime
    end_at: datetime

    @property
    def hours(self) -> float:
        return round((self.end_at - self.start_at).total_seconds() / 3600, 2)


@dataclass(frozen=True)
class OvertimeRequest:
    """Domain entity: an overtime proposal awaiting (or past) a supervisor decision."""

    request_id: str
    employee_id: str
    display_name: str
    site_id: Optional[str]
    interval: OvertimeInterval
    reason: str
    status: RequestStatus
    created_at: datetime
    approver_name: Optional[str] = None
    decided_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
