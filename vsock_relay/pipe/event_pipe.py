from typing import Any, TypeVar, Generic
from abc import abstractmethod
from ..event.emitter import AbstractEmitter

T1 = TypeVar('T1')
T2 = TypeVar('T2')


class EventPipe(AbstractEmitter, Generic[T1, T2]):
    """
    Duplex pipe: `write()` sends T1 chunks, received T2 chunks arrive as
    "data" events. There is no read(); register a pipeline("data", ...)
    handler instead.

    Events: "data" (chunk), "close" (*args), "error" (exception).
    """

    @abstractmethod
    async def write(self, chunk: T1) -> bool:
        pass

    @abstractmethod
    async def terminate(self, *args: Any) -> None:
        pass
