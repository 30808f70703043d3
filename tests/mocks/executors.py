from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable


class DeferredExecutor:
    """Collects submissions and runs them only when the test says so."""

    def __init__(self) -> None:
        self.pending: list[tuple[Future, Callable[..., Any], tuple[Any, ...]]] = []

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        fut: Future = Future()
        self.pending.append((fut, fn, args))
        return fut

    def run(self, index: int = 0) -> Future:
        fut, fn, args = self.pending.pop(index)
        try:
            fut.set_result(fn(*args))
        except Exception as e:
            fut.set_exception(e)
        return fut

    def shutdown(self, wait: bool = True) -> None:
        self.pending.clear()
