"""
services/task_runner.py
-----------------------
Runs blocking operations on worker threads and delivers their results back
to the asyncio event loop that submitted them.

The event loop is the presentation thread: handlers submit work, return
immediately, and later consume a `TaskHandle`. Results are handed over with
``loop.call_soon_threadsafe``, so done-callbacks and awaiting coroutines
always run on the loop thread, never on a worker.

There is no cancellation and no ordering between tasks. A task that was
submitted first may complete last.
"""

import asyncio
import itertools
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from config import TASK_MAX_WORKERS, TASK_QUEUE_SIZE
from db.errors import JobPortalError
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TaskRejectedError(JobPortalError):
    """The runner is saturated or shut down and did not accept the task."""


@dataclass(frozen=True)
class TaskResult(Generic[T]):
    """
    Terminal outcome of a task: either a value or the exception it raised.

    Attributes:
        value: Return value of the operation (None on failure).
        error: Exception raised by the operation (None on success).
    """
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value


class TaskHandle(Generic[T]):
    """
    Token for one submitted task.

    Await it (on the submitting loop) to get the `TaskResult`. Awaiting
    never raises for a failed operation; check ``result.ok`` instead.
    """

    def __init__(self, name: str, future: "asyncio.Future[TaskResult[T]]"):
        self.name = name
        self._future = future

    def __await__(self):
        return self._future.__await__()

    def done(self) -> bool:
        return self._future.done()

    def result(self) -> TaskResult[T]:
        """
        Return the delivered result.

        Raises:
            asyncio.InvalidStateError: If the result has not been delivered yet.
        """
        return self._future.result()

    def add_done_callback(self, fn: Callable[[TaskResult[T]], Any]) -> None:
        """Call ``fn(result)`` on the loop thread once the result is delivered."""
        self._future.add_done_callback(lambda fut: fn(fut.result()))

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"<TaskHandle {self.name} {state}>"


class TaskRunner:
    """
    Executes operations off the event loop.

    With ``max_workers > 0`` operations share a fixed thread pool and at most
    ``max_workers + queue_size`` tasks may be in flight; further submissions
    raise `TaskRejectedError`. With ``max_workers == 0`` every task gets its
    own thread and nothing is ever rejected.
    """

    def __init__(self, max_workers: int = TASK_MAX_WORKERS, queue_size: int = TASK_QUEUE_SIZE):
        if max_workers < 0 or queue_size < 0:
            raise ValueError("max_workers and queue_size must not be negative")
        self.max_workers = max_workers
        self.queue_size = queue_size
        self._executor: Optional[ThreadPoolExecutor] = None
        self._slots: Optional[threading.BoundedSemaphore] = None
        if max_workers > 0:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="job-task"
            )
            self._slots = threading.BoundedSemaphore(max_workers + queue_size)
        self._counter = itertools.count(1)
        self._closed = False

    def submit(self, operation: Callable[..., T], *args: Any, name: Optional[str] = None) -> TaskHandle[T]:
        """
        Schedule ``operation(*args)`` on a worker thread.

        Must be called from the thread running the event loop.

        Args:
            operation: Blocking callable to run.
            *args: Positional arguments for the callable.
            name: Label used in logs; defaults to the callable's name.

        Returns:
            A TaskHandle resolved on this loop when the operation finishes.

        Raises:
            TaskRejectedError: If the runner is shut down or saturated.
            RuntimeError: If no event loop is running in this thread.
        """
        loop = asyncio.get_running_loop()
        task_name = f"{name or getattr(operation, '__name__', 'task')}#{next(self._counter)}"

        if self._closed:
            raise TaskRejectedError(f"Task runner is shut down; rejected {task_name}.")
        if self._slots is not None and not self._slots.acquire(blocking=False):
            logger.warning(f"Task runner saturated, rejected {task_name}")
            raise TaskRejectedError(f"Too many pending tasks; rejected {task_name}.")

        future: asyncio.Future = loop.create_future()

        def run() -> None:
            try:
                result = TaskResult(value=operation(*args))
            except BaseException as e:
                # Every outcome resolves the handle, not only Exception subclasses.
                logger.error(f"Task {task_name} failed: {e}")
                result = TaskResult(error=e)
            finally:
                if self._slots is not None:
                    self._slots.release()
            self._deliver(loop, future, result, task_name)

        logger.debug(f"Submitting task {task_name}")
        if self._executor is not None:
            try:
                self._executor.submit(run)
            except RuntimeError as e:
                self._slots.release()
                raise TaskRejectedError(f"Task runner is shut down; rejected {task_name}.", cause=e) from e
        else:
            threading.Thread(target=run, name=f"job-task-{task_name}", daemon=True).start()
        return TaskHandle(task_name, future)

    @staticmethod
    def _deliver(loop: asyncio.AbstractEventLoop, future: asyncio.Future, result: TaskResult, task_name: str) -> None:
        """Hand the result to the loop thread; it resolves the future there."""

        def resolve() -> None:
            if not future.done():
                future.set_result(result)

        try:
            loop.call_soon_threadsafe(resolve)
        except RuntimeError:
            # The loop closed while the task ran; nobody is left to read it.
            logger.warning(f"Event loop closed before {task_name} finished; result dropped.")

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and, optionally, wait for running ones."""
        self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
        logger.info("Task runner stopped.")
