from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger, ScanService
from .database.capabilities import SchemaCapabilities, detect_capabilities
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .notifications.dispatcher import NotificationDispatcher
from .notifications.transport import MailTransport
from .ojt.mysql_daily_log_repository import MySQLDailyLogRepository
from .ojt.mysql_journal_repository import MySQLJournalRepository
from .ojt.repository import DailyLogRepository, JournalRepository
from .ojt.service import OjtService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import IdentityResolver, StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    """Everything a request handler needs, built once per app."""

    capabilities: SchemaCapabilities
    mail_transport: MailTransport

    users_repo: UserRepository
    students_repo: StudentRepository
    events_repo: EventRepository
    attendance_repo: AttendanceRepository
    daily_logs_repo: DailyLogRepository
    journals_repo: JournalRepository

    auth_service: AuthService
    identity_resolver: IdentityResolver
    student_service: StudentService
    event_service: EventService
    ledger: AttendanceLedger
    dispatcher: NotificationDispatcher
    scan_service: ScanService
    ojt_service: OjtService


def wire(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    events_repo: EventRepository,
    attendance_repo: AttendanceRepository,
    daily_logs_repo: DailyLogRepository,
    journals_repo: JournalRepository,
    mail_transport: MailTransport,
    capabilities: Optional[SchemaCapabilities] = None,
    ojt_required_hours: Optional[float] = None,
    clock=None,
) -> Container:
    """Assemble services on top of the given repositories (MySQL or in-memory)."""

    capabilities = capabilities or SchemaCapabilities()

    auth_service = AuthService(users_repo)
    identity_resolver = IdentityResolver(students_repo)
    student_service = StudentService(students_repo)
    event_service = EventService(events_repo)
    ledger = AttendanceLedger(attendance_repo)
    dispatcher = NotificationDispatcher(mail_transport, attendance_repo, capabilities)

    scan_kwargs = {"clock": clock} if clock else {}
    scan_service = ScanService(identity_resolver, event_service, ledger, dispatcher, **scan_kwargs)

    ojt_kwargs = {"required_hours": ojt_required_hours} if ojt_required_hours else {}
    ojt_service = OjtService(daily_logs_repo, journals_repo, **ojt_kwargs)

    return Container(
        capabilities=capabilities,
        mail_transport=mail_transport,
        users_repo=users_repo,
        students_repo=students_repo,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        daily_logs_repo=daily_logs_repo,
        journals_repo=journals_repo,
        auth_service=auth_service,
        identity_resolver=identity_resolver,
        student_service=student_service,
        event_service=event_service,
        ledger=ledger,
        dispatcher=dispatcher,
        scan_service=scan_service,
        ojt_service=ojt_service,
    )


def build_container(
    *,
    db_config: dict,
    mail_transport: MailTransport,
    ojt_required_hours: Optional[float] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    capabilities = detect_capabilities(conn)

    return wire(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        events_repo=MySQLEventRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn, capabilities),
        daily_logs_repo=MySQLDailyLogRepository(conn, capabilities),
        journals_repo=MySQLJournalRepository(conn),
        mail_transport=mail_transport,
        capabilities=capabilities,
        ojt_required_hours=ojt_required_hours,
    )
