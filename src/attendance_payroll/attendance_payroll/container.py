from __future__ import annotations

from dataclasses import dataclass

from .adjustments.mysql_adjustment_repository import (
    MySQLAdvanceRepository,
    MySQLBonusRepository,
    MySQLDeductionRepository,
    MySQLLeaveRepository,
)
from .adjustments.service import AdjustmentService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_blocklist_repository import MySQLBlocklistRepository
from .attendance.mysql_unmatched_repository import MySQLUnmatchedPunchRepository
from .attendance.service import AttendanceService
from .core.constants import INGEST_RETRY_ATTEMPTS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.service import SalaryDeliveryService
from .payroll.service import PayrollService
from .schedules.mysql_schedule_repository import MySQLScheduleHistoryRepository
from .schedules.service import ScheduleHistoryService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .terminations.mysql_termination_repository import MySQLTerminationRepository
from .terminations.service import TerminationService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    schedules_repo: MySQLScheduleHistoryRepository
    attendance_repo: MySQLAttendanceRepository
    unmatched_repo: MySQLUnmatchedPunchRepository
    blocklist_repo: MySQLBlocklistRepository
    leaves_repo: MySQLLeaveRepository
    advances_repo: MySQLAdvanceRepository
    bonuses_repo: MySQLBonusRepository
    deductions_repo: MySQLDeductionRepository
    payments_repo: MySQLPaymentRepository
    terminations_repo: MySQLTerminationRepository
    settings_repo: MySQLSettingsRepository

    settings_service: SettingsService
    schedule_service: ScheduleHistoryService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    adjustment_service: AdjustmentService
    payroll_service: PayrollService
    delivery_service: SalaryDeliveryService
    termination_service: TerminationService


def build_container(*, db_config: dict, ingest_retry_attempts: int = INGEST_RETRY_ATTEMPTS) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    employees_repo = MySQLEmployeeRepository(conn)
    schedules_repo = MySQLScheduleHistoryRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    unmatched_repo = MySQLUnmatchedPunchRepository(conn)
    blocklist_repo = MySQLBlocklistRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    advances_repo = MySQLAdvanceRepository(conn)
    bonuses_repo = MySQLBonusRepository(conn)
    deductions_repo = MySQLDeductionRepository(conn)
    payments_repo = MySQLPaymentRepository(conn)
    terminations_repo = MySQLTerminationRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)

    settings_service = SettingsService(settings_repo)
    schedule_service = ScheduleHistoryService(schedules_repo, employees_repo)
    employee_service = EmployeeService(employees_repo, schedule_service, conn)
    attendance_service = AttendanceService(
        attendance_repo,
        unmatched_repo,
        blocklist_repo,
        employees_repo,
        conn,
        retry_attempts=ingest_retry_attempts,
    )
    adjustment_service = AdjustmentService(leaves_repo, advances_repo, bonuses_repo, deductions_repo, employees_repo)
    payroll_service = PayrollService(
        employees_repo,
        attendance_repo,
        schedules_repo,
        leaves_repo,
        advances_repo,
        bonuses_repo,
        deductions_repo,
        settings_service,
    )
    delivery_service = SalaryDeliveryService(
        payments_repo,
        employees_repo,
        attendance_repo,
        advances_repo,
        payroll_service,
        conn,
    )
    termination_service = TerminationService(terminations_repo, employees_repo, blocklist_repo, payroll_service, conn)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        unmatched_repo=unmatched_repo,
        blocklist_repo=blocklist_repo,
        leaves_repo=leaves_repo,
        advances_repo=advances_repo,
        bonuses_repo=bonuses_repo,
        deductions_repo=deductions_repo,
        payments_repo=payments_repo,
        terminations_repo=terminations_repo,
        settings_repo=settings_repo,
        settings_service=settings_service,
        schedule_service=schedule_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        adjustment_service=adjustment_service,
        payroll_service=payroll_service,
        delivery_service=delivery_service,
        termination_service=termination_service,
    )
