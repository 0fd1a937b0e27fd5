"""
InsightHub data model.

The whole application state is one Document:

    {"tasks": [Task], "stats": Stats, "users": [User]}

serialized as a single JSON object. Field names on the wire use the
dashboard's camelCase (``createdAt``); Python attributes stay snake_case.
"""
from enum import Enum
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from .errors import CorruptData


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class StatKind(Enum):
    """Dashboard actions that bump a usage counter."""
    SUMMARY = "summary"
    TASK = "task"
    IDEA = "idea"
    SENTIMENT = "sentiment"
    CHAT = "chat"

    @property
    def counter(self) -> str:
        """Name of the Stats field this kind increments."""
        return _COUNTERS[self]

    @classmethod
    def from_str(cls, value) -> Optional["StatKind"]:
        try:
            return cls(value)
        except ValueError:
            return None


_COUNTERS = {
    StatKind.SUMMARY: "summaries",
    StatKind.TASK: "tasks",
    StatKind.IDEA: "ideas",
    StatKind.SENTIMENT: "sentiments",
    StatKind.CHAT: "chats",
}


def _require_int(value, what: str) -> int:
    # bool is an int subclass; a stored `true` is not a valid id or counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise CorruptData(f"{what} must be an integer, got {value!r}")
    return value


@dataclass
class Task:
    """One entry on the dashboard task list."""
    id: int
    text: str
    done: bool = False
    created_at: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "done": self.done,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        if not isinstance(data, dict):
            raise CorruptData(f"task entry must be an object, got {type(data).__name__}")
        if not isinstance(data.get("text"), str):
            raise CorruptData(f"task {data.get('id')!r} has no text")
        done = data.get("done", False)
        if not isinstance(done, bool):
            raise CorruptData(f"task {data.get('id')!r} has non-boolean done {done!r}")
        return cls(
            id=_require_int(data.get("id"), "task id"),
            text=data["text"],
            done=done,
            created_at=data.get("createdAt") or utc_now(),
        )


@dataclass
class Stats:
    """Usage counters. Only ever incremented, or zeroed by a reset."""
    summaries: int = 0
    tasks: int = 0
    ideas: int = 0
    sentiments: int = 0
    chats: int = 0

    def increment(self, kind: StatKind) -> None:
        setattr(self, kind.counter, getattr(self, kind.counter) + 1)

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stats":
        if not isinstance(data, dict):
            raise CorruptData(f"stats must be an object, got {type(data).__name__}")
        values = {}
        for f in fields(cls):
            value = _require_int(data.get(f.name, 0), f"stats.{f.name}")
            if value < 0:
                raise CorruptData(f"stats.{f.name} is negative ({value})")
            values[f.name] = value
        return cls(**values)


@dataclass
class User:
    """A registered account. Password is stored exactly as submitted."""
    id: int
    email: str
    password: str
    created_at: str = field(default_factory=utc_now)

    def public_dict(self) -> Dict[str, Any]:
        """Fields safe to return to the client."""
        return {"id": self.id, "email": self.email}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        if not isinstance(data, dict):
            raise CorruptData(f"user entry must be an object, got {type(data).__name__}")
        if not isinstance(data.get("email"), str):
            raise CorruptData(f"user {data.get('id')!r} has no email")
        return cls(
            id=_require_int(data.get("id"), "user id"),
            email=data["email"],
            password=str(data.get("password", "")),
            created_at=data.get("createdAt") or utc_now(),
        )


@dataclass
class Document:
    """The aggregate persisted as one file."""
    tasks: List[Task] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    users: List[User] = field(default_factory=list)

    def find_task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "stats": self.stats.to_dict(),
            "users": [u.to_dict() for u in self.users],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        """
        Build a Document from parsed JSON.

        Missing containers default to empty so files written by older
        versions still load; anything present but malformed raises CorruptData.
        """
        if not isinstance(data, dict):
            raise CorruptData(f"document root must be an object, got {type(data).__name__}")
        tasks = data.get("tasks", [])
        users = data.get("users", [])
        if not isinstance(tasks, list):
            raise CorruptData("'tasks' must be a list")
        if not isinstance(users, list):
            raise CorruptData("'users' must be a list")
        return cls(
            tasks=[Task.from_dict(t) for t in tasks],
            stats=Stats.from_dict(data.get("stats", {})),
            users=[User.from_dict(u) for u in users],
        )
