"""
Schedule Board
Holds the current snapshot and its composed views, and drives the two
recomputation timers:

- data refresh (DATA_REFRESH_SECONDS): replace the snapshot and rebuild
  every view, ordering and merging included
- clock tick (CLOCK_TICK_SECONDS): re-resolve the current slot against the
  existing snapshot only, so the grid never reshuffles between refreshes

The board owns no threads; the caller decides when to call poll(). Methods
taking `now` read the farm clock when it is omitted.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from farmhub.error_handlers.exceptions import SnapshotFetchException
from farmhub.error_handlers.logging import log_refresh_operation, refresh_logger
from farmhub.utils.timezone import farm_now, minutes_of_day, to_farm_time
from .schedule_dates import describe_schedule_date, report_prompt_due
from .schedule_loader import load_schedule_payload
from .schedule_types import Role, ScheduleData, ScheduleHeading
from .time_range import TimeRangeResolver
from .view_composer import ComposedViews, ViewComposer

logger = logging.getLogger(__name__)

SnapshotSource = Callable[[], Union[ScheduleData, Mapping[str, Any]]]


class ScheduleBoard:
    """
    Snapshot-keyed views plus a clock-keyed current slot for one viewer.

    Args:
        current_user: Viewer's name
        user_type: Session user type string, mapped to a Role
        task_meta: Optional display metadata keyed by canonical task name
        known_users: Optional roster used to detect task rows
        settings: Config class (defaults to get_config())
    """

    def __init__(
        self,
        current_user: Optional[str] = None,
        user_type: Optional[str] = None,
        task_meta: Optional[Mapping[str, Any]] = None,
        known_users: Optional[Iterable[str]] = None,
        settings=None
    ):
        if settings is None:
            from farmhub.config import get_config
            settings = get_config()
        self.settings = settings
        self.current_user = current_user
        self.role = Role.from_user_type(user_type, settings.EXTERNAL_VOLUNTEER_ROLE)
        self.task_meta = task_meta
        self.known_users = None if known_users is None else tuple(known_users)

        self.snapshot: ScheduleData = ScheduleData.empty()
        self.views: Optional[ComposedViews] = None
        self.current_slot_id: Optional[str] = None
        self.last_error_id: Optional[str] = None

        self._resolver = TimeRangeResolver(())
        self._last_refresh: Optional[datetime] = None
        self._last_tick: Optional[datetime] = None

    # ===== Snapshot-keyed pipeline =====

    def load(self, snapshot: ScheduleData, now: Optional[datetime] = None) -> ComposedViews:
        """Replace the snapshot, rebuild all views and resolve the current slot"""
        now = self._now(now)
        composer = ViewComposer(
            snapshot,
            current_user=self.current_user,
            task_meta=self.task_meta,
            known_users=self.known_users,
            boost_weight=self.settings.ANCHOR_BOOST_WEIGHT,
            streak_weight=self.settings.STREAK_WEIGHT,
        )
        if self.current_user and composer.user_row is None and snapshot.row_count:
            refresh_logger.refresh_warning(
                'snapshot load',
                f"{self.current_user!r} is not on the schedule; showing the unanchored grid"
            )
        self.snapshot = snapshot
        self.views = composer.compose(role=self.role)
        self._resolver = TimeRangeResolver(snapshot.slots)
        self._last_refresh = now
        self.tick(now)
        log_refresh_operation('snapshot loaded', {
            'schedule_date': snapshot.schedule_date,
            'current_slot': self.current_slot_id,
        })
        return self.views

    def refresh(self, fetch: SnapshotSource, now: Optional[datetime] = None) -> bool:
        """
        Fetch a fresh snapshot from the persistence collaborator and load it.

        A failed fetch is logged and the previous snapshot stays in place.

        Returns:
            True if a new snapshot was loaded
        """
        now = self._now(now)
        refresh_logger.refresh_started('schedule refresh')
        self._last_refresh = now
        try:
            result = fetch()
            snapshot = result if isinstance(result, ScheduleData) else load_schedule_payload(result)
        except Exception as e:
            error = e if isinstance(e, SnapshotFetchException) else SnapshotFetchException(
                f'Snapshot fetch failed: {e}',
                details={'cause': type(e).__name__}
            )
            self.last_error_id = refresh_logger.refresh_failed('schedule refresh', error, {
                'current_user': self.current_user,
            })
            return False

        self.last_error_id = None
        self.load(snapshot, now)
        refresh_logger.refresh_completed('schedule refresh', {
            'people': snapshot.row_count,
            'slots': len(snapshot.slots),
        })
        return True

    # ===== Clock-keyed =====

    def tick(self, now: Optional[datetime] = None) -> Optional[str]:
        """Re-resolve the current slot against the existing snapshot"""
        now = self._now(now)
        self._last_tick = now
        slot_id = self._resolver.current_slot_id(
            minutes_of_day(now, self.settings.SCHEDULE_TIMEZONE)
        )
        if slot_id != self.current_slot_id:
            logger.debug(f"Current slot changed: {self.current_slot_id!r} -> {slot_id!r}")
        self.current_slot_id = slot_id
        return self.current_slot_id

    def poll(self, now: Optional[datetime] = None, fetch: Optional[SnapshotSource] = None) -> None:
        """Run whichever of refresh and tick is due at now"""
        now = self._now(now)
        refresh_due = self._is_due(self._last_refresh, self.settings.DATA_REFRESH_SECONDS, now)
        if fetch is not None and refresh_due:
            self.refresh(fetch, now)
            # refresh already ticked when it loaded; a failed fetch still needs one
            if self._last_tick == now:
                return
        if self._is_due(self._last_tick, self.settings.CLOCK_TICK_SECONDS, now):
            self.tick(now)

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else farm_now(self.settings.SCHEDULE_TIMEZONE)

    @staticmethod
    def _is_due(last: Optional[datetime], interval_seconds: int, now: datetime) -> bool:
        return last is None or now - last >= timedelta(seconds=interval_seconds)

    # ===== Viewer helpers =====

    def views_for(self, role: Optional[Role] = None) -> Optional[ComposedViews]:
        """Composed views gated for role (defaults to the board's own role)"""
        if self.views is None:
            return None
        return self.views.for_role(role or self.role)

    def heading(self, now: Optional[datetime] = None) -> ScheduleHeading:
        local_now = to_farm_time(self._now(now), self.settings.SCHEDULE_TIMEZONE)
        return describe_schedule_date(self.snapshot.schedule_date, local_now.date())

    def report_prompt_due(self, now: Optional[datetime] = None) -> bool:
        """Whether the viewer should be prompted for the daily report"""
        row = self.snapshot.find_person(self.current_user)
        if row is None:
            return False
        return report_prompt_due(
            self.snapshot.schedule_date,
            to_farm_time(self._now(now), self.settings.SCHEDULE_TIMEZONE),
            self.snapshot.report_flag(row),
            self.settings.REPORT_PROMPT_HOUR,
        )
