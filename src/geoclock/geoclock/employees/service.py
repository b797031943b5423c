from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError, EmployeeNotFoundError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeDirectory:
    """Use case: resolve the employee behind a login identifier."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(str(employee_id).strip())
        if not employee or not employee.is_active:
            raise EmployeeNotFoundError()
        return employee


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, identifier: str, credential: str) -> Employee:
        employee = self._employees.get_by_id(str(identifier).strip())
        if not employee or not employee.is_active:
            logger.info("login rejected for unknown identifier %r", identifier)
            raise AuthenticationError()

        try:
            ok = check_password_hash(employee.credential_hash, credential)
        except (TypeError, ValueError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("login rejected for %s: wrong credential", employee.employee_id)
            raise AuthenticationError()
        return employee
