"""ScriptedExecutor — stand-in executor that replays canned results in order."""

from typing import Any

from intent_kit.execution.application.executor import Operation
from intent_kit.execution.domain.config import ExecutionConfig
from intent_kit.execution.domain.errors import ExecutionFailedError


class ScriptedExecutor:
    """Returns queued results one per execute() call.

    execute() takes the same arguments as IntentExecutor.execute() but never
    runs the operation, so it can replace the real executor in host code and in
    IntentCheck.
    """

    def __init__(self) -> None:
        self._results: list[Any] = []
        self._index = 0

    def add_result(self, result: Any) -> None:
        self._results.append(result)

    async def execute(
        self,
        operation: Operation[Any] | None = None,
        config: ExecutionConfig | None = None,
        name: str | None = None,
    ) -> Any:
        """Return the next queued result, ignoring every argument.

        Raises:
            ExecutionFailedError: if every queued result has been consumed.
        """
        if self._index >= len(self._results):
            raise ExecutionFailedError("no more scripted results available")
        result = self._results[self._index]
        self._index += 1
        return result

    def reset(self) -> None:
        self._index = 0
        self._results.clear()
