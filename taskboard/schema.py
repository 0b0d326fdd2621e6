"""
Task schema, drop targets and drag state.

Status columns:
  todo → in-progress → done

Any status may move to any other; the board only cares which column a
card sits in. The status values double as the three reserved column
tokens a drop target can name.
"""
from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple, Union


class TaskStatus(Enum):
    """Board columns, in display order."""
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def from_str(cls, value: str) -> "TaskStatus":
        """Strict lookup by wire value. Raises ValidationError."""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Invalid status: {value!r}") from None


COLUMN_TOKENS: Tuple[str, ...] = tuple(s.value for s in TaskStatus)
COLUMN_TITLES: Dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}


class ValidationError(Exception):
    """Raised when a task record fails validation."""
    pass


def utc_now() -> str:
    """ISO-8601 UTC timestamp with microseconds."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title is required")
    return title.strip()


@dataclass
class Task:
    """A single card on the board."""

    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape the API speaks (camelCase timestamps)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Deserialize from an API payload or a store row."""
        status = data.get("status") or TaskStatus.TODO.value
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description") or "",
            status=status if isinstance(status, TaskStatus) else TaskStatus.from_str(status),
            created_at=data.get("createdAt") or data.get("created_at") or "",
            updated_at=data.get("updatedAt") or data.get("updated_at") or "",
        )


# ── Drop targets ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Column:
    """Drop target naming a whole status column."""
    status: TaskStatus


@dataclass(frozen=True)
class TaskRef:
    """Drop target naming another card."""
    task_id: str


DropTarget = Union[Column, TaskRef]


def as_drop_target(raw: Union[str, DropTarget, None]) -> Optional[DropTarget]:
    """
    Resolve a raw drop-target identifier.

    Column tokens are checked first, so a task can never shadow a column
    even if its id happens to equal "todo".
    """
    if raw is None or isinstance(raw, (Column, TaskRef)):
        return raw
    if raw in COLUMN_TOKENS:
        return Column(TaskStatus(raw))
    return TaskRef(str(raw))


def target_id(target: DropTarget) -> str:
    if isinstance(target, Column):
        return target.status.value
    return target.task_id


# ── Drag state ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""
    pass


@dataclass(frozen=True)
class Dragging:
    """
    One active gesture.

    original_status is fixed at drag start; drag_over may change the
    card's live status but never this field.
    """
    task_id: str
    original_status: TaskStatus
    last_over: Optional[Tuple[str, DropTarget]] = None


DragState = Union[Idle, Dragging]

IDLE = Idle()
