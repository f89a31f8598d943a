"""
Automation Types - Data structures shared by the signup backends

Contains:
- Framework enum - which backend runs a signup
- AutomationResult - outcome of one sign_up call
- TaskStatus / TaskPhase / RemoteTask - AI task queue bookkeeping
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import ElementNotFound, InvalidTaskTransition
from ..error_handler import get_error_category


class Framework(str, Enum):
    """Available automation backends"""
    PLAYWRIGHT = "playwright"
    BROWSERBASE = "browserbase"
    SKYVERN = "skyvern"

    @property
    def display_name(self) -> str:
        return {
            Framework.PLAYWRIGHT: "Playwright",
            Framework.BROWSERBASE: "Browserbase",
            Framework.SKYVERN: "Skyvern",
        }[self]


@dataclass(frozen=True)
class AutomationResult:
    """Result of a newsletter signup attempt"""
    success: bool
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: Exception, **details) -> 'AutomationResult':
        """Build a failed result from an exception caught at a backend boundary."""
        details["error_category"] = get_error_category(error)
        if isinstance(error, ElementNotFound):
            details["stage"] = error.stage
        return cls(success=False, error=str(error) or type(error).__name__, details=details)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            data["error"] = self.error
        if self.details:
            data["details"] = dict(self.details)
        return data


class TaskStatus(str, Enum):
    """Remote view of an AI task"""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'TaskStatus':
        normalized = (value or "").strip().upper()
        if normalized in cls.__members__:
            return cls[normalized]
        if normalized in ("CREATED", "QUEUED"):
            return cls.PENDING
        if normalized in ("TERMINATED", "CANCELED", "CANCELLED", "TIMED_OUT"):
            return cls.FAILED
        return cls.RUNNING

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


class TaskPhase(str, Enum):
    """Local lifecycle of an AI task"""
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


TASK_TRANSITIONS = {
    TaskPhase.SUBMITTED: {TaskPhase.POLLING},
    TaskPhase.POLLING: {TaskPhase.POLLING, TaskPhase.COMPLETED, TaskPhase.FAILED, TaskPhase.TIMED_OUT},
    TaskPhase.COMPLETED: set(),
    TaskPhase.FAILED: set(),
    TaskPhase.TIMED_OUT: set(),
}


@dataclass
class RemoteTask:
    """A task submitted to the AI task queue, tracked until a terminal phase"""
    task_id: str
    status: TaskStatus = TaskStatus.PENDING
    phase: TaskPhase = TaskPhase.SUBMITTED
    extracted_info: Optional[Dict[str, Any]] = None
    failure_reason: Optional[str] = None
    polls: int = 0

    def advance(self, phase: TaskPhase) -> None:
        if phase not in TASK_TRANSITIONS[self.phase]:
            raise InvalidTaskTransition(
                f"Task {self.task_id}: illegal transition {self.phase.value} -> {phase.value}"
            )
        self.phase = phase

    def fail(self, reason: str) -> None:
        """Move an unfinished task to FAILED after a local error."""
        if self.is_finished:
            return
        if self.phase == TaskPhase.SUBMITTED:
            self.advance(TaskPhase.POLLING)
        self.failure_reason = reason
        self.advance(TaskPhase.FAILED)

    def record_poll(self, payload: Dict[str, Any]) -> None:
        """Apply one status payload and move to the matching phase."""
        self.advance(TaskPhase.POLLING)
        self.polls += 1
        self.status = TaskStatus.parse(payload.get("status"))
        if self.status == TaskStatus.COMPLETED:
            info = payload.get("extracted_information")
            self.extracted_info = info if isinstance(info, dict) else None
            self.advance(TaskPhase.COMPLETED)
        elif self.status == TaskStatus.FAILED:
            self.failure_reason = payload.get("failure_reason")
            self.advance(TaskPhase.FAILED)

    @property
    def is_finished(self) -> bool:
        return not TASK_TRANSITIONS[self.phase]


__all__ = [
    'Framework', 'AutomationResult', 'TaskStatus', 'TaskPhase',
    'TASK_TRANSITIONS', 'RemoteTask',
]
