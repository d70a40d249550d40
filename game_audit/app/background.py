from __future__ import annotations

import atexit
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from flask import current_app

_executor_lock = threading.Lock()
_executor: ThreadPoolExecutor | None = None


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is not None:
        return _executor

    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=2,
                thread_name_prefix="game-audit-bg",
            )
            atexit.register(_executor.shutdown, wait=False)
    return _executor


def submit_background_task(
    func: Callable[..., Any],
    *args: Any,
    description: str | None = None,
    **kwargs: Any,
) -> Future[Any]:
    """
    Run ``func`` in a thread pool while preserving the Flask app context.

    With ``BACKGROUND_TASKS_INLINE`` set the task runs in the calling thread
    and the returned future is already resolved.
    """
    app = current_app._get_current_object()
    task_description = description or getattr(func, "__name__", "background task")

    def runner() -> Any:
        with app.app_context():
            try:
                return func(*args, **kwargs)
            except Exception:
                app.logger.exception("Background task failed: %s", task_description)
                raise

    if app.config.get("BACKGROUND_TASKS_INLINE"):
        future: Future[Any] = Future()
        try:
            future.set_result(runner())
        except Exception as exc:
            future.set_exception(exc)
        return future

    return _get_executor().submit(runner)
