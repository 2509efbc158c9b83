"""Session record, session types, and persistent session storage."""

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path

from tomato_cli.utils.clock import Clock, now
from tomato_cli.utils.logger import get_logger

from .exceptions import PersistenceError

# A saved session older than this is discarded instead of recovered.
STALE_AFTER = timedelta(hours=24)


class SessionType(str, Enum):
    """Kind of interval being timed."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class TimerState(str, Enum):
    """Lifecycle state of the timer as seen by the front ends."""

    IDLE = "idle"
    AWAITING_START = "awaiting_start"
    RUNNING = "running"
    PAUSED = "paused"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    # Only produced by recovery; the timer routes it straight to completion.
    EXPIRED = "expired"


@dataclass(frozen=True)
class SessionInfo:
    """Presentation and notification data for one session type."""

    name: str
    emoji: str
    color: str
    completion_body: str


SESSION_INFO: dict[SessionType, SessionInfo] = {
    SessionType.WORK: SessionInfo(
        name="Work Session",
        emoji="🍅",
        color="red",
        completion_body="Time for a break! Great work! 🎉",
    ),
    SessionType.SHORT_BREAK: SessionInfo(
        name="Short Break",
        emoji="☕",
        color="green",
        completion_body="Break's over! Ready to focus? 💪",
    ),
    SessionType.LONG_BREAK: SessionInfo(
        name="Long Break",
        emoji="🌴",
        color="blue",
        completion_body="Break's over! Ready to focus? 💪",
    ),
}


def _parse_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO 8601 timestamp, got {value!r}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        # Naive timestamps are taken as local time
        parsed = parsed.astimezone()
    return parsed


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class Session:
    """The single persisted timer record.

    ``remaining_seconds`` is authoritative only while paused or stopped.
    For a running session it is a snapshot; the live value is always
    recomputed from ``start_time``.
    """

    session_type: SessionType = SessionType.WORK
    completed_cycles: int = 0
    remaining_seconds: int = 0
    is_running: bool = False
    is_paused: bool = False
    start_time: datetime | None = None
    paused_at: datetime | None = None
    saved_at: datetime | None = None

    def __post_init__(self):
        self.session_type = SessionType(self.session_type)
        if self.is_paused and not self.is_running:
            raise ValueError("A paused session must also be running")
        if self.completed_cycles < 0:
            raise ValueError("completed_cycles cannot be negative")
        if self.remaining_seconds < 0:
            raise ValueError("remaining_seconds cannot be negative")

    @property
    def info(self) -> SessionInfo:
        return SESSION_INFO[self.session_type]

    def is_stale(self, at: datetime) -> bool:
        """True when the record was saved more than STALE_AFTER before *at*."""
        if self.saved_at is None:
            return True
        return at - self.saved_at > STALE_AFTER

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary."""
        data = asdict(self)
        data["session_type"] = self.session_type.value
        data["start_time"] = _format_time(self.start_time)
        data["paused_at"] = _format_time(self.paused_at)
        data["saved_at"] = _format_time(self.saved_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create from dictionary.

        Raises ValueError, KeyError or TypeError on malformed data.
        """
        return cls(
            session_type=SessionType(data["session_type"]),
            completed_cycles=int(data["completed_cycles"]),
            remaining_seconds=int(data["remaining_seconds"]),
            is_running=bool(data["is_running"]),
            is_paused=bool(data["is_paused"]),
            start_time=_parse_time(data.get("start_time")),
            paused_at=_parse_time(data.get("paused_at")),
            saved_at=_parse_time(data.get("saved_at")),
        )


class SessionStore:
    """Keeps the one current session in a JSON file.

    Every save overwrites the whole record. Loading never fails: a
    missing or unreadable file simply means there is no session.
    """

    def __init__(self, state_dir: Path | None = None, clock: Clock = now):
        if state_dir is None:
            from platformdirs import user_data_dir

            state_dir = Path(user_data_dir("tomato_cli")) / "state"

        self.state_dir = state_dir
        self.state_file = self.state_dir / "current_session.json"
        self.clock = clock
        self.logger = get_logger()

    def save(self, session: Session) -> Session:
        """Stamp ``saved_at`` on *session* and write it out."""
        session.saved_at = self.clock()
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            with open(self.state_file, "w", encoding="utf-8") as f:
                json.dump(session.to_dict(), f, indent=2)

            # Set secure permissions
            self.state_file.chmod(0o600)
        except OSError as e:
            self.logger.error("failed to save session to %s: %s", self.state_file, e)
            raise PersistenceError(f"Could not save session: {e}") from e
        return session

    def load(self) -> Session | None:
        """Load the saved session. Returns None if missing or invalid."""
        try:
            with open(self.state_file, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning("ignoring unreadable session file: %s", e)
            return None

        try:
            return Session.from_dict(data)
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning("ignoring invalid session record: %s", e)
            return None

    def clear(self) -> None:
        """Delete the saved session, if any."""
        try:
            self.state_file.unlink(missing_ok=True)
        except OSError as e:
            self.logger.error("failed to remove %s: %s", self.state_file, e)
            raise PersistenceError(f"Could not clear session: {e}") from e

    def has_active(self) -> bool:
        """Check whether a fresh, running or paused session is saved."""
        session = self.load()
        return (
            session is not None
            and not session.is_stale(self.clock())
            and session.is_running
        )
