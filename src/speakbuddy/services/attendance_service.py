"""Attendance service for daily check-ins, streaks and snack rewards."""
import logging
from dataclasses import replace
from typing import Optional, Union

from speakbuddy import monitoring
from speakbuddy.clock import ClockSource
from speakbuddy.config import AttendanceSettings, settings
from speakbuddy.models.progress_models import (
    AttendanceState,
    Buddy,
    CheckInResult,
    Mood,
    ResultReason,
    SnackResult,
    normalize_history,
)
from speakbuddy.services.store import DocumentStore

logger = logging.getLogger(__name__)


class AttendanceService:
    """Service for the daily check-in state machine.

    Every mutation reloads the stored state while holding the store lock for
    the attendance key, so a second call always sees the first one's result.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: ClockSource,
        config: Optional[AttendanceSettings] = None,
    ):
        """Initialize the service with a store and a clock."""
        self.store = store
        self.clock = clock
        self.config = config or settings.attendance

    @property
    def key(self) -> str:
        return self.config.document_key

    def _decode(self, data) -> AttendanceState:
        return AttendanceState.from_data(data, self.config.history_limit)

    def get_state(self) -> AttendanceState:
        """Get the current attendance state."""
        return self.store.load(self.key, self._decode, AttendanceState)

    def _save(self, state: AttendanceState) -> bool:
        return self.store.set(self.key, state.to_data())

    def choose_buddy(self, choice: Union[Buddy, str]) -> AttendanceState:
        """Pick the cat or the dog. Can be changed at any time."""
        buddy = Buddy(choice)
        with self.store.locked(self.key):
            state = self.get_state()
            if state.buddy is not buddy:
                changed = replace(state, buddy=buddy)
                if not self._save(changed):
                    return state
                state = changed
                logger.info(f"Buddy set to {buddy.value}")
            return state

    def can_check_in_today(self) -> bool:
        return self.get_state().last_check != self.clock.today()

    def check_in(self) -> CheckInResult:
        """Check in for today and collect snacks."""
        with self.store.locked(self.key):
            state = self.get_state()
            today = self.clock.today()

            if state.last_check == today:
                monitoring.check_ins.labels(result="already_checked_in_today").inc()
                logger.debug(f"Already checked in on {today}")
                return CheckInResult(ok=False, reason=ResultReason.ALREADY_CHECKED_IN_TODAY)

            if self.clock.is_consecutive(state.last_check, today):
                streak = state.streak + 1
            else:
                streak = 1

            bonus = self.config.bonus_snacks if streak % self.config.bonus_every_days == 0 else 0
            earned = self.config.daily_snacks + bonus

            state = replace(
                state,
                snacks=state.snacks + earned,
                streak=streak,
                last_check=today,
                history=self._history_with(state.history, today),
            )
            if not self._save(state):
                monitoring.check_ins.labels(result="storage_unavailable").inc()
                return CheckInResult(ok=False, reason=ResultReason.STORAGE_UNAVAILABLE)

        monitoring.check_ins.labels(result="ok").inc()
        monitoring.snacks_awarded.inc(earned)
        logger.info(f"Checked in on {today}: streak {streak}, earned {earned} snacks (bonus {bonus})")
        return CheckInResult(ok=True, streak=streak, bonus=bonus)

    def _history_with(self, history, today) -> tuple:
        # lastCheck is always the newest day in history
        kept = [day for day in history if day < today]
        return normalize_history(kept + [today], self.config.history_limit)

    def give_snack(self) -> SnackResult:
        """Feed one snack to the buddy."""
        with self.store.locked(self.key):
            state = self.get_state()
            if state.snacks <= 0:
                logger.debug("No snacks left to give")
                return SnackResult(ok=False, snacks=0, reason=ResultReason.NO_SNACKS)

            fed = replace(state, snacks=state.snacks - 1)
            if not self._save(fed):
                return SnackResult(ok=False, snacks=state.snacks, reason=ResultReason.STORAGE_UNAVAILABLE)
            state = fed

        monitoring.snacks_given.inc()
        return SnackResult(ok=True, snacks=state.snacks)

    def mood_for(self, state: AttendanceState) -> Mood:
        """Project the buddy's mood from ``state`` as of today. Never cached."""
        if state.last_check is None:
            return Mood.CONTENT
        days_away = self.clock.diff_days(state.last_check, self.clock.today())
        if days_away >= self.config.distress_after_days:
            return Mood.DISTRESSED
        return Mood.CONTENT

    def mood(self) -> Mood:
        """Get the buddy's mood for the current state."""
        return self.mood_for(self.get_state())
