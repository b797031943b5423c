from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..core.enums import RequestStatus
from .model import OvertimeRequest
from .repository import OvertimeRepository


class InMemoryOvertimeRepository(OvertimeRepository):
    def __init__(self):
        self._by_id: Dict[str, OvertimeRequest] = {}
        self._lock = threading.Lock()

    def add(self, request: OvertimeRequest) -> None:
        with self._lock:
            if request.request_id in self._by_id:
                raise ValueError(f"duplicate request id {request.request_id}")
            self._by_id[request.request_id] = request

    def get(self, request_id: str) -> Optional[OvertimeRequest]:
        return self._by_id.get(request_id)

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        approver_name: str,
        decided_at: datetime,
    ) -> bool:
        with self._lock:
            current = self._by_id.get(request_id)
            if not current or current.status != RequestStatus.PENDING:
                return False
            self._by_id[request_id] = replace(current, status=status, approver_name=approver_name, decided_at=decided_at)
            return True

    def _newest_first(self, items: List[OvertimeRequest], limit: int) -> List[OvertimeRequest]:
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[: int(limit)]

    def list_for_employee(self, employee_id: str, *, limit: int) -> Sequence[OvertimeRequest]:
        with self._lock:
            items = [r for r in self._by_id.values() if r.employee_id == employee_id]
        return self._newest_first(items, limit)

    def list_for_supervisor(self, site_id: Optional[str], *, limit: int) -> Sequence[OvertimeRequest]:
        with self._lock:
            items = [r for r in self._by_id.values() if r.is_pending or (site_id and r.site_id == site_id)]
        return self._newest_first(items, limit)
