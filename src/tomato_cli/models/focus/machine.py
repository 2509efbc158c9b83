"""The Pomodoro session state machine.

Both front ends drive a :class:`PomodoroTimer`: the one-shot CLI builds a
fresh one per command with :meth:`PomodoroTimer.restore`, while the
interactive UI keeps one alive and calls :meth:`check_expiry` every second.
Nothing here counts down; every remaining-time figure is derived from
timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

from tomato_cli.utils.clock import Clock, now
from tomato_cli.utils.logger import get_logger

from .cycling import next_session
from .exceptions import InvalidTransitionError, PersistenceError
from .recovery import recover, remaining_seconds
from .state import SESSION_INFO, Session, SessionStore, SessionType, TimerState

if TYPE_CHECKING:
    from tomato_cli.models.config_models import PomodoroSettings


class Notifier(Protocol):
    """Anything that can show the user an alert without raising."""

    def notify(self, title: str, body: str, with_sound: bool = True) -> bool: ...


@dataclass(frozen=True)
class Completion:
    """What happened when an interval finished."""

    finished: SessionType
    next_type: SessionType
    title: str
    body: str


ACTIVE_STATES = (TimerState.RUNNING, TimerState.PAUSED)


class PomodoroTimer:
    """Owns one session and every legal move between states."""

    def __init__(
        self,
        settings: PomodoroSettings,
        store: SessionStore | None = None,
        notifier: Notifier | None = None,
        clock: Clock = now,
        session: Session | None = None,
        state: TimerState = TimerState.IDLE,
    ):
        self.settings = settings
        self.store = store
        self.notifier = notifier
        self.clock = clock
        self.session = session or self._fresh_session()
        self.state = state
        # Set by restore() when the saved interval ran out while nobody watched
        self.expired_completion: Completion | None = None
        self.logger = get_logger()

    @classmethod
    def restore(
        cls,
        store: SessionStore,
        settings: PomodoroSettings,
        notifier: Notifier | None = None,
        clock: Clock = now,
    ) -> PomodoroTimer:
        """Build a timer from whatever the store holds right now."""
        result = recover(store.load(), clock(), settings)
        if result.stale:
            get_logger().warning("discarding stale session")
            try:
                store.clear()
            except PersistenceError:
                pass  # already logged by the store; the stale record is ignored

        timer = cls(
            settings,
            store=store,
            notifier=notifier,
            clock=clock,
            session=result.session,
            state=result.state,
        )
        if result.expired:
            timer.logger.info("session expired while no process was running")
            timer.expired_completion = timer._complete()
        return timer

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def total_seconds(self) -> int:
        return self.settings.total_seconds_for(self.session.session_type)

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES

    def refresh(self) -> int:
        """Recompute ``remaining_seconds`` if running, and return it."""
        if self.state is TimerState.RUNNING:
            self.session.remaining_seconds = remaining_seconds(
                self.session, self.clock(), self.settings
            )
        return self.session.remaining_seconds

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin the current interval, or resume it when paused."""
        if self.state is TimerState.RUNNING:
            raise self._refuse("Timer is already running!")
        if self.state is TimerState.PAUSED:
            self.resume()
            return
        if self.state is TimerState.AWAITING_CONFIRMATION:
            self.confirm(True)
            return
        self._begin()

    def pause(self) -> None:
        if self.state is TimerState.PAUSED:
            raise self._refuse("Timer is already paused!")
        if self.state is not TimerState.RUNNING:
            raise self._refuse("No timer is running!")

        self.refresh()
        self.session.is_paused = True
        self.session.paused_at = self.clock()
        self._set_state(TimerState.PAUSED)
        self._persist()

    def resume(self) -> None:
        if self.state is not TimerState.PAUSED:
            raise self._refuse("No paused timer to resume!")

        at = self.clock()
        # Push the start forward so the pause does not count as elapsed time
        self.session.start_time += at - self.session.paused_at
        self.session.is_paused = False
        self.session.paused_at = None
        self._set_state(TimerState.RUNNING)
        self._persist()

    def stop(self) -> None:
        """Abandon whatever is going on and forget the saved session."""
        if self.store is not None:
            self.store.clear()
        self.session = self._fresh_session()
        self._set_state(TimerState.IDLE)

    def skip(self) -> Completion:
        """Finish the current interval now, whatever time is left."""
        if self.state not in ACTIVE_STATES:
            raise self._refuse("No active timer to skip")
        return self._complete()

    def check_expiry(self) -> Completion | None:
        """Complete the interval if its time is up. Safe to call any time."""
        if self.state is not TimerState.RUNNING:
            return None
        if self.refresh() > 0:
            return None
        return self._complete()

    def confirm(self, accept: bool) -> None:
        """Answer the "ready for the next interval?" question."""
        if self.state is not TimerState.AWAITING_CONFIRMATION:
            raise self._refuse("Nothing to confirm")
        if accept:
            self._begin()
            return

        # Keep the advanced session in memory so a later start continues the cycle
        if self.store is not None:
            self.store.clear()
        self._set_state(TimerState.IDLE)

    def save_if_active(self) -> bool:
        """Persist the session when there is one worth resuming.

        Front ends call this on exit and on termination signals.
        """
        if self.state not in (*ACTIVE_STATES, TimerState.AWAITING_CONFIRMATION):
            return False
        self.refresh()
        self._persist()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fresh_session(self) -> Session:
        return Session(
            session_type=SessionType.WORK,
            remaining_seconds=self.settings.total_seconds_for(SessionType.WORK),
        )

    def _begin(self) -> None:
        total = self.total_seconds
        remaining = self.session.remaining_seconds
        if remaining <= 0 or remaining > total:
            remaining = total

        # Back-date the start so a partly used interval continues where it was
        self.session.start_time = self.clock() - timedelta(seconds=total - remaining)
        self.session.remaining_seconds = remaining
        self.session.is_running = True
        self.session.is_paused = False
        self.session.paused_at = None
        self._set_state(TimerState.RUNNING)
        self._persist()

    def _complete(self) -> Completion:
        finished = self.session.session_type
        info = SESSION_INFO[finished]
        title = f"{info.name} Complete! {info.emoji}"
        body = info.completion_body

        if self.notifier is not None:
            self.notifier.notify(title, body, with_sound=True)

        next_type, cycles = next_session(
            finished,
            self.session.completed_cycles,
            self.settings.cycles_before_long_break,
        )
        self.session = Session(
            session_type=next_type,
            completed_cycles=cycles,
            remaining_seconds=self.settings.total_seconds_for(next_type),
            saved_at=self.session.saved_at,
        )
        self._set_state(TimerState.AWAITING_CONFIRMATION)
        self._persist()
        return Completion(finished=finished, next_type=next_type, title=title, body=body)

    def _refuse(self, message: str) -> InvalidTransitionError:
        self.logger.info("refused in state %s: %s", self.state.value, message)
        return InvalidTransitionError(message)

    def _set_state(self, state: TimerState) -> None:
        if state is not self.state:
            self.logger.info(
                "timer %s -> %s (%s)",
                self.state.value,
                state.value,
                self.session.session_type.value,
            )
        self.state = state

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.session)
