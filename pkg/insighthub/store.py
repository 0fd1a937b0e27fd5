"""
InsightHub storage backend (single JSON file).

Every operation is a full load → mutate → save cycle on one document.
A process-wide lock wraps each cycle, so two requests handled on
different threads never interleave their read and write.
"""
import json
import logging
import os
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .errors import CorruptData, InvalidInput, NotFound
from .schema import Document, Stats, StatKind, Task

logger = logging.getLogger(__name__)

# One critical section for the whole process, shared by every JsonStore.
_LOCK = threading.RLock()


def next_id(existing: Iterable[int]) -> int:
    """Epoch milliseconds, bumped past the largest id already in use."""
    now_ms = int(time.time() * 1000)
    highest = max(existing, default=0)
    return max(now_ms, highest + 1)


def _validate_text(text) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInput("Task text is required")
    return text


class JsonStore:
    """JSON-file-backed store for tasks, stats and users."""

    def __init__(self, path: Optional[str] = None):
        """Initialize store and write an empty document if the file is missing."""
        if path is None:
            path = str(Path.home() / ".local" / "share" / "insighthub" / "data.json")
        self.path = Path(path)
        self.ensure_exists()

    def ensure_exists(self) -> None:
        with _LOCK:
            if self.path.exists():
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.save(Document())
            logger.info(f"Created data file {self.path}")

    # ── Document I/O ──────────────────────────────────────────────────────

    def load(self) -> Document:
        """Read and parse the whole document. Raises CorruptData on bad content."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Document()
        except OSError as e:
            raise CorruptData(f"Cannot read {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptData(f"{self.path} is not valid JSON: {e}") from e
        return Document.from_dict(data)

    def save(self, doc: Document) -> None:
        """Replace the file contents atomically (temp file + rename)."""
        payload = json.dumps(doc.to_dict(), indent=2)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(temp_path, self.path)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        """
        Load the document under the global lock and save it on clean exit.

        If the body raises, nothing is written.
        """
        with _LOCK:
            doc = self.load()
            yield doc
            self.save(doc)

    def snapshot(self) -> Document:
        """Read-only load, still serialized against writers."""
        with _LOCK:
            return self.load()

    # ── Tasks ─────────────────────────────────────────────────────────────

    def list_tasks(self) -> List[Task]:
        """All tasks in insertion order."""
        return self.snapshot().tasks

    def add_task(self, text: str) -> Task:
        return self.add_tasks([text])[0]

    def add_tasks(self, texts: List[str]) -> List[Task]:
        """Append several tasks in one save. Validates all before writing any."""
        texts = [_validate_text(t) for t in texts]
        created = []
        with self.transaction() as doc:
            for text in texts:
                task = Task(id=next_id(t.id for t in doc.tasks), text=text)
                doc.tasks.append(task)
                created.append(task)
        for task in created:
            logger.info(f"Task {task.id} added")
        return created

    def set_task_done(self, task_id: int, done: bool) -> Task:
        if not isinstance(done, bool):
            raise InvalidInput("'done' must be true or false")
        with self.transaction() as doc:
            task = doc.find_task(task_id)
            if task is None:
                raise NotFound("Task not found")
            task.done = done
        logger.debug(f"Task {task_id} done={done}")
        return task

    def remove_task(self, task_id: int) -> None:
        with self.transaction() as doc:
            task = doc.find_task(task_id)
            if task is None:
                raise NotFound("Task not found")
            doc.tasks.remove(task)
        logger.info(f"Task {task_id} removed")

    # ── Stats ─────────────────────────────────────────────────────────────

    def get_stats(self) -> Stats:
        return self.snapshot().stats

    def record_event(self, kind) -> Stats:
        """
        Bump the counter for ``kind`` ("summary", "task", ...).

        Unknown kinds are ignored and the current counters returned as-is.
        """
        stat_kind = kind if isinstance(kind, StatKind) else StatKind.from_str(kind)
        if stat_kind is None:
            logger.debug(f"Ignoring unknown stat type {kind!r}")
            return self.get_stats()
        with self.transaction() as doc:
            doc.stats.increment(stat_kind)
        return doc.stats

    def reset_all(self) -> None:
        """Clear tasks and zero every counter. Users are kept."""
        with _LOCK:
            try:
                doc = self.load()
            except CorruptData as e:
                logger.warning(f"Data file unreadable, rewriting from defaults: {e}")
                doc = Document()
            doc.tasks = []
            doc.stats = Stats()
            self.save(doc)
        logger.info("Tasks and stats reset")
