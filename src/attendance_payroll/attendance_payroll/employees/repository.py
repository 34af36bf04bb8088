from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import Employee, FlatRateProfile


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_biometric_id(self, biometric_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def biometric_id_map(self) -> Mapping[str, int]:
        """Current biometric id -> employee id mapping (ids trimmed)."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, employee: Employee) -> int:
        """Insert the profile (``employee_id`` is ignored) and return the new id."""

        raise NotImplementedError

    def update(self, employee: Employee) -> bool:
        raise NotImplementedError

    def set_biometric_id(self, employee_id: int, biometric_id: str) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError

    def get_flat_rate_profile(self, employee_id: int) -> Optional[FlatRateProfile]:
        raise NotImplementedError
