from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from .announcements.repository import AnnouncementRepository
from .announcements.supabase_announcement_repository import SupabaseAnnouncementRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.supabase_attendance_repository import SupabaseAttendanceRepository
from .backend.connection import BackendConfig, BackendConnection, TokenProvider
from .backend.functions import SupabaseAccountFunctions
from .backend.realtime import SupabaseChangeFeed
from .bookings.service import BookingService
from .bookings.supabase_booking_repository import SupabaseBookingRepository
from .core.enums import QrScanMode
from .feedback.service import FeedbackService
from .feedback.supabase_feedback_repository import SupabaseFeedbackRepository
from .occupancy.reader import OccupancyReader
from .occupancy.service import SeatService
from .occupancy.supabase_occupancy_repository import (
    SupabaseLibrarySettingsRepository,
    SupabaseLibraryStatusSource,
)
from .qr.service import QrAttendanceService
from .reports.service import ReportService
from .settings.store import LocalSettingsStore
from .timeslots.service import TimeSlotService
from .timeslots.supabase_timeslot_repository import SupabaseTimeSlotRepository
from .users.service import AccountAdminService, AuthService, ProfileService
from .users.supabase_auth_gateway import SupabaseAuthGateway
from .users.supabase_profile_repository import SupabaseProfileRepository
from .users.supabase_role_repository import SupabaseRoleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    conn: Optional[BackendConnection]

    attendance_repo: AttendanceRepository
    announcements_repo: AnnouncementRepository

    auth_service: AuthService
    profile_service: ProfileService
    account_admin_service: AccountAdminService
    timeslot_service: TimeSlotService
    attendance_service: AttendanceService
    qr_service: QrAttendanceService
    booking_service: BookingService
    feedback_service: FeedbackService
    report_service: ReportService
    seat_service: SeatService

    occupancy_reader: OccupancyReader
    settings_store: LocalSettingsStore

    def start(self) -> None:
        """Load occupancy and open its change feed (when one is configured)."""
        try:
            self.occupancy_reader.start()
        except Exception:
            # Occupancy degrades to on-demand reads; the app keeps serving.
            logger.exception("could not start occupancy change feed")

    def close(self) -> None:
        self.occupancy_reader.stop()


def build_container(
    *,
    supabase_config: dict,
    timezone: str = "UTC",
    cooldown_minutes: int = 10,
    qr_scan_mode: str = QrScanMode.VERIFY.value,
    qr_max_age_minutes: int = 1440,
    settings_path: str,
    enable_realtime: bool = True,
    token_provider: Optional[TokenProvider] = None,
) -> Container:
    config = BackendConfig(
        url=str(supabase_config["url"]),
        anon_key=str(supabase_config["anon_key"]),
        reader_token=supabase_config.get("reader_token") or None,
    )
    conn = BackendConnection(config, token_provider=token_provider)
    tz = ZoneInfo(timezone)

    profiles_repo = SupabaseProfileRepository(conn, tz)
    roles_repo = SupabaseRoleRepository(conn)
    attendance_repo = SupabaseAttendanceRepository(conn, tz)
    slots_repo = SupabaseTimeSlotRepository(conn)
    bookings_repo = SupabaseBookingRepository(conn, tz)
    feedback_repo = SupabaseFeedbackRepository(conn, tz)
    announcements_repo = SupabaseAnnouncementRepository(conn, tz)

    attendance_service = AttendanceService(
        attendance_repo,
        profiles_repo,
        tz=tz,
        cooldown_minutes=cooldown_minutes,
    )

    feed = None
    if enable_realtime:
        feed = SupabaseChangeFeed(config, table="attendance", channel_name="library-status-changes")

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        announcements_repo=announcements_repo,
        auth_service=AuthService(SupabaseAuthGateway(conn), profiles_repo, roles_repo),
        profile_service=ProfileService(profiles_repo),
        account_admin_service=AccountAdminService(
            profiles_repo, roles_repo, SupabaseAccountFunctions(conn), slots_repo
        ),
        timeslot_service=TimeSlotService(slots_repo),
        attendance_service=attendance_service,
        qr_service=QrAttendanceService(
            attendance_service,
            profiles_repo,
            mode=QrScanMode(qr_scan_mode),
            max_age_minutes=qr_max_age_minutes,
        ),
        booking_service=BookingService(bookings_repo, profiles_repo),
        feedback_service=FeedbackService(feedback_repo, profiles_repo),
        report_service=ReportService(attendance_repo, profiles_repo, tz=tz),
        seat_service=SeatService(SupabaseLibrarySettingsRepository(conn), attendance_repo, tz=tz),
        occupancy_reader=OccupancyReader(SupabaseLibraryStatusSource(conn), feed=feed),
        settings_store=LocalSettingsStore(Path(settings_path)),
    )
