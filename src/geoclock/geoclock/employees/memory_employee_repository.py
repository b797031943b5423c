from __future__ import annotations

from typing import Dict, Iterable, Optional

from .model import Employee
from .repository import EmployeeRepository


class InMemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_id: Dict[str, Employee] = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def put(self, employee: Employee) -> None:
        """Administrative data entry (seeding/tests)."""
        self._by_id[employee.employee_id] = employee
