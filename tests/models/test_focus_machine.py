"""Unit tests for the PomodoroTimer state machine.

All timers use the fake clock from conftest and a tmp_path-backed store,
so durations are checked to the second without sleeping.
"""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from tomato_cli.models.config_models import PomodoroSettings
from tomato_cli.models.focus.exceptions import InvalidTransitionError
from tomato_cli.models.focus.machine import PomodoroTimer
from tomato_cli.models.focus.state import Session, SessionType, TimerState


@pytest.fixture()
def notifier():
    mock = MagicMock()
    mock.notify.return_value = True
    return mock


@pytest.fixture()
def timer(settings, store, notifier, clock):
    return PomodoroTimer(settings, store=store, notifier=notifier, clock=clock)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestInit:
    def test_fresh_timer_is_idle_work(self, timer):
        assert timer.state is TimerState.IDLE
        assert timer.session.session_type is SessionType.WORK
        assert timer.session.remaining_seconds == 1500
        assert timer.is_active is False

    def test_total_seconds_follows_session_type(self, timer):
        timer.session = Session(session_type=SessionType.LONG_BREAK)
        assert timer.total_seconds == 900


class TestRestore:
    def test_empty_store_is_idle(self, store, settings, clock):
        timer = PomodoroTimer.restore(store, settings, clock=clock)
        assert timer.state is TimerState.IDLE
        assert timer.expired_completion is None

    def test_running_session_resumes_counting(self, store, settings, clock):
        store.save(
            Session(
                remaining_seconds=1500,
                is_running=True,
                start_time=clock() - timedelta(minutes=10),
            )
        )
        timer = PomodoroTimer.restore(store, settings, clock=clock)
        assert timer.state is TimerState.RUNNING
        assert timer.session.remaining_seconds == 900

    def test_stale_session_cleared(self, store, settings, clock):
        store.save(Session(remaining_seconds=1500, is_running=True, start_time=clock()))
        clock.advance(hours=25)
        timer = PomodoroTimer.restore(store, settings, clock=clock)
        assert timer.state is TimerState.IDLE
        assert not store.state_file.exists()

    def test_expired_session_completes(self, store, settings, notifier, clock):
        store.save(
            Session(
                remaining_seconds=1500,
                is_running=True,
                start_time=clock() - timedelta(minutes=30),
            )
        )
        timer = PomodoroTimer.restore(store, settings, notifier=notifier, clock=clock)

        assert timer.expired_completion is not None
        assert timer.expired_completion.finished is SessionType.WORK
        assert timer.state is TimerState.AWAITING_CONFIRMATION
        assert timer.session.session_type is SessionType.SHORT_BREAK
        assert timer.session.completed_cycles == 1
        notifier.notify.assert_called_once()

    def test_not_running_session_awaits_start(self, store, settings, clock):
        store.save(Session(session_type=SessionType.SHORT_BREAK, remaining_seconds=300))
        timer = PomodoroTimer.restore(store, settings, clock=clock)
        assert timer.state is TimerState.AWAITING_START
        assert timer.session.session_type is SessionType.SHORT_BREAK


# ---------------------------------------------------------------------------
# start / pause / resume
# ---------------------------------------------------------------------------


class TestStart:
    def test_start_runs_and_persists(self, timer, store, clock):
        timer.start()
        assert timer.state is TimerState.RUNNING
        assert timer.session.start_time == clock()
        saved = store.load()
        assert saved.is_running is True
        assert saved.session_type is SessionType.WORK

    def test_start_while_running_refused(self, timer):
        timer.start()
        with pytest.raises(InvalidTransitionError, match="already running"):
            timer.start()

    def test_start_while_paused_resumes(self, timer, clock):
        timer.start()
        clock.advance(60)
        timer.pause()
        timer.start()
        assert timer.state is TimerState.RUNNING
        assert timer.session.is_paused is False

    def test_start_continues_partial_interval(self, store, settings, clock):
        store.save(Session(remaining_seconds=600))
        timer = PomodoroTimer.restore(store, settings, clock=clock)
        timer.start()
        assert timer.session.start_time == clock() - timedelta(seconds=900)
        assert timer.refresh() == 600

    def test_start_uses_current_settings(self, store, clock):
        timer = PomodoroTimer(PomodoroSettings(work_minutes=50), store=store, clock=clock)
        timer.start()
        assert timer.refresh() == 3000


class TestPauseResume:
    def test_pause_freezes_remaining(self, timer, clock):
        timer.start()
        clock.advance(100)
        timer.pause()
        assert timer.state is TimerState.PAUSED
        assert timer.session.remaining_seconds == 1400

        clock.advance(400)
        assert timer.refresh() == 1400

    def test_resume_excludes_paused_time(self, timer, clock):
        t0 = clock()
        timer.start()
        clock.advance(100)
        timer.pause()
        clock.advance(400)
        timer.resume()

        assert timer.session.start_time == t0 + timedelta(seconds=400)
        assert timer.session.paused_at is None
        clock.advance(100)
        assert timer.refresh() == 1300

    def test_pause_twice_leaves_state_alone(self, timer, clock):
        timer.start()
        clock.advance(100)
        timer.pause()
        paused_at = timer.session.paused_at
        clock.advance(50)

        with pytest.raises(InvalidTransitionError, match="already paused"):
            timer.pause()
        assert timer.session.paused_at == paused_at
        assert timer.session.remaining_seconds == 1400

    def test_pause_when_idle_refused(self, timer):
        with pytest.raises(InvalidTransitionError, match="No timer is running"):
            timer.pause()

    def test_resume_when_running_refused(self, timer):
        timer.start()
        with pytest.raises(InvalidTransitionError, match="No paused timer"):
            timer.resume()

    def test_pause_persists(self, timer, store, clock):
        timer.start()
        clock.advance(30)
        timer.pause()
        saved = store.load()
        assert saved.is_paused is True
        assert saved.paused_at == clock()


# ---------------------------------------------------------------------------
# stop / skip / completion
# ---------------------------------------------------------------------------


class TestStop:
    def test_stop_clears_store_and_resets(self, timer, store, clock):
        timer.start()
        clock.advance(100)
        timer.stop()
        assert timer.state is TimerState.IDLE
        assert timer.session.session_type is SessionType.WORK
        assert timer.session.remaining_seconds == 1500
        assert store.load() is None

    def test_stop_resets_cycle_count(self, timer):
        timer.start()
        timer.skip()
        timer.stop()
        assert timer.session.completed_cycles == 0


class TestCompletion:
    def test_skip_moves_to_short_break(self, timer, notifier, store):
        timer.start()
        completion = timer.skip()

        assert completion.finished is SessionType.WORK
        assert completion.next_type is SessionType.SHORT_BREAK
        assert completion.title == "Work Session Complete! 🍅"
        assert timer.state is TimerState.AWAITING_CONFIRMATION
        assert timer.session.remaining_seconds == 300
        assert timer.session.is_running is False
        notifier.notify.assert_called_once_with(
            completion.title, completion.body, with_sound=True
        )
        assert store.load().session_type is SessionType.SHORT_BREAK

    def test_skip_when_idle_refused(self, timer):
        with pytest.raises(InvalidTransitionError):
            timer.skip()

    def test_skip_while_paused(self, timer, clock):
        timer.start()
        clock.advance(10)
        timer.pause()
        completion = timer.skip()
        assert completion.finished is SessionType.WORK

    def test_long_break_after_threshold(self, store, notifier, clock):
        timer = PomodoroTimer(
            PomodoroSettings(cycles_before_long_break=2),
            store=store,
            notifier=notifier,
            clock=clock,
        )
        timer.start()
        assert timer.skip().next_type is SessionType.SHORT_BREAK
        timer.confirm(True)
        assert timer.skip().next_type is SessionType.WORK
        timer.confirm(True)
        completion = timer.skip()

        assert completion.next_type is SessionType.LONG_BREAK
        assert timer.session.completed_cycles == 0
        assert timer.session.remaining_seconds == 900

    def test_check_expiry_before_end(self, timer, clock):
        timer.start()
        clock.advance(1499)
        assert timer.check_expiry() is None
        assert timer.state is TimerState.RUNNING

    def test_check_expiry_at_end(self, timer, clock):
        timer.start()
        clock.advance(1500)
        completion = timer.check_expiry()
        assert completion is not None
        assert completion.finished is SessionType.WORK

    def test_check_expiry_ignores_paused(self, timer, clock):
        timer.start()
        timer.pause()
        clock.advance(3600)
        assert timer.check_expiry() is None

    def test_works_without_notifier(self, settings, store, clock):
        timer = PomodoroTimer(settings, store=store, clock=clock)
        timer.start()
        assert timer.skip().next_type is SessionType.SHORT_BREAK


class TestConfirm:
    def test_accept_starts_next(self, timer, clock):
        timer.start()
        timer.skip()
        timer.confirm(True)
        assert timer.state is TimerState.RUNNING
        assert timer.session.session_type is SessionType.SHORT_BREAK
        assert timer.session.start_time == clock()

    def test_decline_clears_store_keeps_next(self, timer, store):
        timer.start()
        timer.skip()
        timer.confirm(False)
        assert timer.state is TimerState.IDLE
        assert store.load() is None
        assert timer.session.session_type is SessionType.SHORT_BREAK

        timer.start()
        assert timer.session.session_type is SessionType.SHORT_BREAK

    def test_confirm_without_completion_refused(self, timer):
        with pytest.raises(InvalidTransitionError, match="Nothing to confirm"):
            timer.confirm(True)

    def test_start_while_awaiting_confirmation_accepts(self, timer):
        timer.start()
        timer.skip()
        timer.start()
        assert timer.state is TimerState.RUNNING
        assert timer.session.session_type is SessionType.SHORT_BREAK


class TestSaveIfActive:
    def test_idle_not_saved(self, timer, store):
        assert timer.save_if_active() is False
        assert store.load() is None

    def test_running_saved_with_fresh_remaining(self, timer, store, clock):
        timer.start()
        clock.advance(200)
        assert timer.save_if_active() is True
        saved = store.load()
        assert saved.remaining_seconds == 1300
        assert saved.saved_at == clock()

    def test_awaiting_confirmation_saved(self, timer, store):
        timer.start()
        timer.skip()
        store.clear()
        assert timer.save_if_active() is True
        assert store.load().session_type is SessionType.SHORT_BREAK
