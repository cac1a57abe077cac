# src/roi_tracker/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.errors import LoadFailure
from ..core.ports import Clock, RecordSource, TaskGenerator
from .derive import compute_metrics, derive_sorted
from .mutations import add_task, build_task, clean_patch, delete_task, undo_delete, update_task
from .normalize import normalize_tasks
from .seed import generate_sales_tasks
from .task_models import EMPTY_METRICS, DerivedTask, Metrics, Task
from .timestamps import utc_now

logger = logging.getLogger(__name__)

DEFAULT_LOAD_ERROR = "Failed to load tasks"


class StorePhase(StrEnum):
    LOADING = "loading"
    READY = "ready"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Everything the presentation layer reads, captured at one instant."""

    phase: StorePhase
    error: str | None
    tasks: tuple[Task, ...]
    derived_sorted: tuple[DerivedTask, ...]
    metrics: Metrics
    last_deleted: Task | None

    @property
    def loading(self) -> bool:
        return self.phase is StorePhase.LOADING


Listener = Callable[[StoreSnapshot], None]


class TaskStore:
    """
    In-memory owner of the canonical task list.

    Lifecycle:
    - LOADING: created; waiting for `load()` (or `ready_with()`).
      Mutations are queued, in call order, and replayed once ready.
    - READY: mutations apply immediately.
    - CLOSED: `close()` was called; a pending load is discarded and
      further mutations are dropped.

    Every change replaces `tasks` with a new tuple and recomputes
    `derived_sorted` and `metrics` from it before anyone can read them.

    Thread-safety:
    - all state changes go through one RLock
    - reads are lock-free: each attribute holds an immutable value that is
      swapped by a single assignment, so a reader sees the old or the new one.
      Use `snapshot()` for a consistent view across attributes.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        generator: TaskGenerator | None = None,
        fallback_count: int = 50,
        fallback_on_error: bool = False,
    ) -> None:
        self._lock = threading.RLock()
        self._clock: Clock = clock or utc_now
        self._generator: TaskGenerator = generator or generate_sales_tasks
        self._fallback_count = max(0, int(fallback_count))
        self._fallback_on_error = fallback_on_error

        self._phase = StorePhase.LOADING
        self._error: str | None = None
        self._tasks: tuple[Task, ...] = ()
        self._derived: tuple[DerivedTask, ...] = ()
        self._metrics: Metrics = EMPTY_METRICS
        self._last_deleted: Task | None = None

        self._load_started = False
        self._pending: deque[tuple[str, Callable[[], None]]] = deque()
        self._listeners: list[Listener] = []

    # ---- read side ----

    @property
    def phase(self) -> StorePhase:
        return self._phase

    @property
    def loading(self) -> bool:
        return self._phase is StorePhase.LOADING

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def derived_sorted(self) -> tuple[DerivedTask, ...]:
        return self._derived

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    @property
    def last_deleted(self) -> Task | None:
        return self._last_deleted

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                phase=self._phase,
                error=self._error,
                tasks=self._tasks,
                derived_sorted=self._derived,
                metrics=self._metrics,
                last_deleted=self._last_deleted,
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(snapshot)` after every change. Returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    # ---- lifecycle ----

    async def load(self, source: RecordSource) -> None:
        """
        Fetch, normalize and install the initial task list.

        Failures never raise: the message lands in `error` and the store
        becomes ready anyway (empty, or with generated tasks when
        fallback_on_error is set). An empty but successful load always
        falls back to generated tasks.
        """
        with self._lock:
            if self._phase is not StorePhase.LOADING or self._load_started:
                logger.warning("load() ignored: store is %s, load started=%s", self._phase.value, self._load_started)
                return
            self._load_started = True

        source_name = getattr(source, "name", type(source).__name__)
        logger.info("Loading tasks from %s", source_name)

        error: str | None = None
        tasks: list[Task] = []
        try:
            raw = await source.fetch_records()
        except asyncio.CancelledError:
            with self._lock:
                self._load_started = False
            raise
        except LoadFailure as e:
            error = e.message or DEFAULT_LOAD_ERROR
            logger.warning("Task load failed source=%s: %s", source_name, error)
        except Exception as e:
            error = str(e) or DEFAULT_LOAD_ERROR
            logger.exception("Record source crashed source=%s", source_name)
        else:
            tasks = normalize_tasks(raw, now=self._clock())

        with self._lock:
            if self._phase is not StorePhase.LOADING:
                logger.info("Store is %s after the fetch; discarding %d task(s).", self._phase.value, len(tasks))
                return

            if not tasks and (error is None or self._fallback_on_error):
                tasks = list(self._generator(self._fallback_count))
                logger.info("No tasks loaded; using %d generated task(s).", len(tasks))

            self._become_ready(tasks, error)

    def ready_with(self, tasks: Iterable[Task], *, error: str | None = None) -> None:
        """Skip the fetch: install `tasks` as-is and become ready."""
        with self._lock:
            if self._phase is not StorePhase.LOADING:
                logger.warning("ready_with() ignored: store is %s", self._phase.value)
                return
            self._become_ready(list(tasks), error)

    def close(self) -> None:
        with self._lock:
            if self._phase is StorePhase.CLOSED:
                return
            dropped = len(self._pending)
            self._phase = StorePhase.CLOSED
            self._pending.clear()
            self._listeners.clear()
        logger.info("TaskStore closed (dropped %d queued mutation(s)).", dropped)

    def _become_ready(self, tasks: list[Task], error: str | None) -> None:
        self._error = error
        self._phase = StorePhase.READY
        self._commit(tasks)
        logger.info(
            "TaskStore ready tasks=%d error=%s queued=%d",
            len(self._tasks),
            error,
            len(self._pending),
        )

        while self._pending:
            label, apply = self._pending.popleft()
            logger.debug("Replaying queued %s", label)
            apply()

    # ---- mutations ----

    def add_task(self, payload: Mapping[str, Any], task_id: str | None = None) -> str:
        """
        Create a task and put it first. Returns its id.

        Raises ValueError when the payload has no title.
        """
        task = build_task(payload, now=self._clock(), task_id=task_id)

        def _apply() -> None:
            self._commit(add_task(self._tasks, task))
            logger.debug("Task added id=%s status=%s", task.id, task.status.value)

        self._submit("add_task", _apply)
        return task.id

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> None:
        """Merge `patch` into the task. Unknown ids are ignored."""
        fields = clean_patch(patch)
        now = self._clock()

        def _apply() -> None:
            if self.get_task(task_id) is None:
                logger.debug("update_task: unknown id=%s", task_id)
            self._commit(update_task(self._tasks, task_id, fields, now=now))

        self._submit("update_task", _apply)

    def delete_task(self, task_id: str) -> None:
        """Remove the task and keep it as the single undo candidate."""

        def _apply() -> None:
            remaining, removed = delete_task(self._tasks, task_id)
            if removed is None:
                logger.debug("delete_task: unknown id=%s", task_id)
                return
            if self._last_deleted is not None:
                logger.debug("Undo history overwritten; id=%s no longer recoverable", self._last_deleted.id)
            self._last_deleted = removed
            self._commit(remaining)

        self._submit("delete_task", _apply)

    def undo_delete(self) -> None:
        def _apply() -> None:
            if self._last_deleted is None:
                return
            restored_id = self._last_deleted.id
            tasks, self._last_deleted = undo_delete(self._tasks, self._last_deleted)
            self._commit(tasks)
            logger.debug("Task restored id=%s", restored_id)

        self._submit("undo_delete", _apply)

    def clear_history(self) -> None:
        def _apply() -> None:
            if self._last_deleted is None:
                return
            self._last_deleted = None
            self._notify()

        self._submit("clear_history", _apply)

    # ---- internals ----

    def _submit(self, label: str, apply: Callable[[], None]) -> None:
        with self._lock:
            if self._phase is StorePhase.CLOSED:
                logger.warning("TaskStore closed; dropping %s", label)
                return
            if self._phase is StorePhase.LOADING:
                self._pending.append((label, apply))
                logger.debug("Queued %s until the store is ready (queued=%d)", label, len(self._pending))
                return
            apply()

    def _commit(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)
        self._derived = tuple(derive_sorted(self._tasks))
        self._metrics = compute_metrics(self._tasks)
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("TaskStore listener failed.")
