"""Timer settings model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tomato_cli.models.focus.state import SessionType


class PomodoroSettings(BaseModel):
    """Interval lengths in minutes and the long-break threshold."""

    work_minutes: int = Field(default=25, gt=0, description="Work session length")
    short_break_minutes: int = Field(default=5, gt=0, description="Short break length")
    long_break_minutes: int = Field(default=15, gt=0, description="Long break length")
    cycles_before_long_break: int = Field(
        default=4, gt=0, description="Work sessions before a long break"
    )

    def duration_for(self, session_type: SessionType) -> int:
        """Configured length of *session_type* in minutes."""
        return {
            SessionType.WORK: self.work_minutes,
            SessionType.SHORT_BREAK: self.short_break_minutes,
            SessionType.LONG_BREAK: self.long_break_minutes,
        }[SessionType(session_type)]

    def total_seconds_for(self, session_type: SessionType) -> int:
        return self.duration_for(session_type) * 60
