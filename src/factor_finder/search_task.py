import itertools
import threading
import time
from enum import Enum
from typing import Callable, Iterator, List, Optional, Union

import structlog

from factor_finder.algorithm.s_min import find_s_min
from factor_finder.algorithm.sas_resolver import sas_resolve
from factor_finder.algorithm.sgs_filter import sgs_filter
from factor_finder.algorithm.trial_division import trial_division
from factor_finder.config import DEFAULT_CONFIG, EngineConfig
from factor_finder.errors import DomainError, ErrorKind, FactorFinderError
from factor_finder.event_queue import EventQueue
from factor_finder.models.commands import SearchCommand, SearchMode, SearchParameters
from factor_finder.models.events import Error, Log, TaskEvent, is_terminal
from factor_finder.numeric.bigint import digit_count

log = structlog.get_logger()

TASK_IDS = itertools.count(1)


class TaskState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    def __str__(self):
        return self.value

    @property
    def terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.CANCELLED, TaskState.FAILED)


Algorithm = Callable[[int, SearchParameters, EngineConfig], Iterator[TaskEvent]]


def select_algorithm(mode: SearchMode) -> Algorithm:
    """Map a mode to its algorithm. Fails before any arithmetic on an unknown mode."""
    match mode:
        case SearchMode.S_MIN:
            return lambda n, params, config: find_s_min(n, config)
        case SearchMode.TRIAL:
            return lambda n, params, config: trial_division(n, params.max, config)
        case SearchMode.SGS:
            return lambda n, params, config: sgs_filter(n, params.min, params.max, config)
        case SearchMode.RESOLVE:
            return lambda n, params, config: sas_resolve(n, params.s_candidates, config)
    raise DomainError(f"invalid search mode {mode!r}", field="mode")


def dispatch(
    params: SearchParameters,
    config: EngineConfig = DEFAULT_CONFIG,
    *,
    n: Optional[int] = None,
) -> Iterator[TaskEvent]:
    """
    Run exactly one algorithm over N = base^exponent + addend.

    N is computed here unless the caller already did so. Every algorithm
    yields at least once per config.progress_interval loop iterations;
    those yields are the cancellation checkpoints of the driving task.
    """
    algorithm = select_algorithm(params.mode)
    if n is None:
        n = params.target()

    yield Log(f"N = {params.base}^{params.exponent} + {params.addend} ({digit_count(n)} digits)")
    yield from algorithm(n, params, config)


class SearchTask:
    """
    One search running on its own background thread.

    Events are published to `events` in generation order and the queue is
    closed when the task ends, whatever the outcome. Cancellation is checked
    before each event is published: once cancel() returns, the task
    publishes nothing more and stops at its next checkpoint.
    """

    def __init__(
        self,
        request: Union[SearchCommand, SearchParameters],
        *,
        config: EngineConfig = DEFAULT_CONFIG,
        events: Optional[EventQueue[TaskEvent]] = None,
    ):
        self.task_id = next(TASK_IDS)
        self.request = request
        self.config = config
        self.events: EventQueue[TaskEvent] = events if events is not None else EventQueue()
        self.state = TaskState.IDLE
        self.n: Optional[int] = None

        self._cancel = threading.Event()
        self._emit_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._log = log.bind(task_id=self.task_id)

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def active(self) -> bool:
        return self.state == TaskState.RUNNING

    def start(self) -> "SearchTask":
        """Run the task on a daemon thread."""
        if self.state != TaskState.IDLE:
            raise RuntimeError(f"task {self.task_id} was already started ({self.state})")
        self.state = TaskState.RUNNING
        self._thread = threading.Thread(target=self._run, name=f"search-task-{self.task_id}", daemon=True)
        self._thread.start()
        return self

    def run(self) -> TaskState:
        """Run the task on the calling thread until it finishes."""
        if self.state != TaskState.IDLE:
            raise RuntimeError(f"task {self.task_id} was already started ({self.state})")
        self.state = TaskState.RUNNING
        self._run()
        return self.state

    def cancel(self) -> None:
        with self._emit_lock:
            self._cancel.set()
        self._log.info("task cancel requested")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the thread to end. Returns False if it is still running."""
        if self._thread is None:
            return self.state.terminal
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _emit(self, event: TaskEvent) -> bool:
        with self._emit_lock:
            if self._cancel.is_set():
                return False
            return self.events.publish(event)

    def _finish(self, state: TaskState) -> None:
        self.state = state
        self._log.info("task finished", state=str(state))

    def _run(self) -> None:
        try:
            params = self.request
            if not isinstance(params, SearchParameters):
                params = SearchParameters.from_command(params)
            select_algorithm(params.mode)
            self.n = params.target()
            self._log.info("task started", mode=str(params.mode), digits=digit_count(self.n))

            for event in dispatch(params, self.config, n=self.n):
                if not self._emit(event):
                    break
                if is_terminal(event):
                    self._finish(TaskState.COMPLETED)
                    return

            if self.cancelled:
                self._finish(TaskState.CANCELLED)
            else:
                raise RuntimeError("search ended without a terminal event")

        except FactorFinderError as e:
            self._fail(e.kind, str(e))
        except Exception as e:
            self._log.exception("task crashed")
            self._fail(ErrorKind.COMPUTATION, f"{type(e).__name__}: {e}")
        finally:
            # Always close the queue so the consumer can exit.
            self.events.close()

    def _fail(self, kind: ErrorKind, message: str) -> None:
        if self._emit(Error(kind=kind, message=message)):
            self._log.warning("task failed", kind=str(kind), message=message)
            self._finish(TaskState.FAILED)
        else:
            self._finish(TaskState.CANCELLED)


class SearchController:
    """Owns at most one active task. Starting a new task replaces the previous one."""

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG, *, stop_timeout: float = 5.0):
        self.config = config
        self.stop_timeout = stop_timeout
        self._lock = threading.Lock()
        self._task: Optional[SearchTask] = None

    @property
    def task(self) -> Optional[SearchTask]:
        return self._task

    def start(self, request: Union[SearchCommand, SearchParameters]) -> SearchTask:
        with self._lock:
            self._stop_locked()
            task = SearchTask(request, config=self.config)
            self._task = task
            return task.start()

    def stop(self) -> bool:
        """Cancel the active task. Returns False when nothing was running."""
        with self._lock:
            return self._stop_locked()

    def _stop_locked(self) -> bool:
        task = self._task
        if task is None or task.state.terminal:
            return False
        task.cancel()
        if not task.join(self.stop_timeout):
            log.warning("previous task still winding down", task_id=task.task_id)
        return True


def collect(task: SearchTask, timeout: Optional[float] = None, *, grace: float = 1.0) -> List[TaskEvent]:
    """
    Drain a started task's events, cancelling it if `timeout` seconds pass first.

    After cancelling, waits at most `grace` seconds for the thread to stop. A
    task stuck in a step with no checkpoint (a huge power or square root) is
    left to finish on its own; it publishes nothing more either way.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    collected: List[TaskEvent] = []
    while True:
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        try:
            event = task.events.get(remaining)
        except TimeoutError:
            task.cancel()
            log.info("task timed out", task_id=task.task_id, timeout=timeout)
            if not task.join(grace):
                log.warning("task still running after cancel", task_id=task.task_id, grace=grace)
            return collected
        if event is None:
            return collected
        collected.append(event)
