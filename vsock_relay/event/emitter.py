from abc import ABC
import asyncio
from functools import partial
import inspect
import logging
from typing import Any, Callable, Dict, List, Set

logger = logging.getLogger(__name__)


class AbstractEmitter(ABC):
    """
    Two kinds of handlers per event name:

    - subscribers (`on`) are fired and forgotten; coroutine subscribers run
      as tasks on the running loop and their failures are only logged.
    - pipelines (`pipeline`) are awaited in order by `_notify` before the
      subscribers see the event, so a slow pipeline applies back-pressure
      and a failing one stops the event.
    """

    def __init__(self):
        self._pipelines: Dict[str, List[Callable]] = {}
        self._subscribers: Dict[str, List[Callable]] = {}
        self._handler_tasks: Set[asyncio.Task] = set()

    def on(self, event: str, handler: Callable) -> None:
        self._subscribers.setdefault(event, []).append(handler)

    def pipeline(self, event: str, handler: Callable) -> None:
        self._pipelines.setdefault(event, []).append(handler)

    def _emit(self, event_type: str, *args: Any) -> None:
        for handler in list(self._subscribers.get(event_type, [])):
            if inspect.iscoroutinefunction(handler):
                self._schedule(event_type, handler, args)
                continue
            try:
                handler(*args)
            except Exception:
                logger.exception("'%s' handler %r failed", event_type, handler)

    def _schedule(self, event_type: str, handler: Callable, args: tuple) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("'%s' handler %r skipped: no running event loop", event_type, handler)
            return
        task = loop.create_task(handler(*args))
        self._handler_tasks.add(task)
        task.add_done_callback(partial(self._handler_done, event_type))

    def _handler_done(self, event_type: str, task: asyncio.Task) -> None:
        self._handler_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("'%s' handler failed", event_type, exc_info=error)

    async def _notify(self, event_type: str, *args: Any) -> None:
        """Run the pipelines for `event_type`, then emit it to subscribers."""
        for handler in self._pipelines.get(event_type, []):
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._emit("error", e)
                raise
        self._emit(event_type, *args)
