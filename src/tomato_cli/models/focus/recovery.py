"""Load-time reconciliation of a saved session with the wall clock.

Each CLI command runs in its own short-lived process, so nothing counts
down between invocations. Instead the remaining time of a running session
is recomputed from its ``start_time`` whenever it is loaded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .state import Session, TimerState

if TYPE_CHECKING:
    from tomato_cli.models.config_models import PomodoroSettings


@dataclass(frozen=True)
class Recovery:
    """Outcome of :func:`recover`."""

    session: Session | None
    state: TimerState
    expired: bool = False
    stale: bool = False


def elapsed_seconds(start_time: datetime, at: datetime) -> int:
    """Whole seconds from *start_time* to *at*, never negative."""
    return max(0, math.floor((at - start_time).total_seconds()))


def remaining_seconds(
    session: Session, at: datetime, settings: PomodoroSettings
) -> int:
    """Live remaining time of a running, unpaused session."""
    total = settings.total_seconds_for(session.session_type)
    return max(0, total - elapsed_seconds(session.start_time, at))


def recover(
    session: Session | None, at: datetime, settings: PomodoroSettings
) -> Recovery:
    """Reconcile *session* with the instant *at*.

    Pure: the input session is never modified and the result depends only
    on the arguments.
    """
    if session is None:
        return Recovery(session=None, state=TimerState.IDLE)

    if session.is_stale(at):
        return Recovery(session=None, state=TimerState.IDLE, stale=True)

    session = replace(session)

    if not session.is_running:
        return Recovery(session=session, state=TimerState.AWAITING_START)

    if session.start_time is None:
        # Rebuild the start instant from the last snapshot
        total = settings.total_seconds_for(session.session_type)
        consumed = max(0, total - session.remaining_seconds)
        session.start_time = at - timedelta(seconds=consumed)
        if session.is_paused:
            session.paused_at = at

    if session.is_paused:
        # Remaining time was frozen at pause
        if session.paused_at is None:
            session.paused_at = at
        return Recovery(session=session, state=TimerState.PAUSED)

    session.remaining_seconds = remaining_seconds(session, at, settings)
    if session.remaining_seconds == 0:
        return Recovery(session=session, state=TimerState.EXPIRED, expired=True)

    return Recovery(session=session, state=TimerState.RUNNING)
