import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Task = Callable[[], Any]
SuccessCallback = Callable[[Any], Any]
ErrorCallback = Callable[[BaseException], Any]


def _noop(_value: Any) -> None:
    pass


@dataclass(frozen=True)
class TaskEntry:
    """A queued task together with the callbacks that receive its outcome."""

    task: Task
    on_success: SuccessCallback = _noop
    on_error: ErrorCallback = _noop

    @classmethod
    def create(
        cls,
        task: Task,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> "TaskEntry":
        if not callable(task):
            raise TypeError(f"task must be callable, got: {task!r}")
        return cls(task, on_success or _noop, on_error or _noop)

    @property
    def name(self) -> str:
        return getattr(self.task, "__qualname__", None) or repr(self.task)

    def succeed(self, result: Any) -> None:
        self.on_success(result)

    def fail(self, error: BaseException) -> None:
        logger.error(f"Task {self.name} failed: {error!r}")
        self.on_error(error)
