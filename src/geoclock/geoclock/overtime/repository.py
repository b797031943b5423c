from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import OvertimeRequest


class OvertimeRepository(Protocol):
    def add(self, request: OvertimeRequest) -> None:
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        approver_name: str,
        decided_at: datetime,
    ) -> bool:
        """Compare-and-swap: only a PENDING request transitions; False otherwise."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: str, *, limit: int) -> Sequence[OvertimeRequest]:
        """Requester's own requests, newest first."""

        raise NotImplementedError

    def list_for_supervisor(self, site_id: Optional[str], *, limit: int) -> Sequence[OvertimeRequest]:
        """Requests of ``site_id`` plus every pending request, newest first."""

        raise NotImplementedError
