from collections import deque
from typing import Deque, Generic, Iterator, Optional, TypeVar
import threading


T = TypeVar("T")


class EventQueue(Generic[T]):
    """Thread-safe, unbounded FIFO queue. Single producer, single consumer, nothing is dropped."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._items: Deque[T] = deque()
        self._closed = False

    def publish(self, item: T) -> bool:
        """Append an item. Returns False if the queue is already closed."""
        with self._condition:
            if self._closed:
                return False
            self._items.append(item)
            self._condition.notify()  # Wake the waiting consumer.
            return True

    def close(self) -> None:
        """Close the queue. Items already published can still be read."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Blocks until an item is available or the queue is closed. Returns None once closed and drained."""
        with self._condition:
            ok = self._condition.wait_for(lambda: self._items or self._closed, timeout)
            if not ok:
                raise TimeoutError("queue get() timed out")
            if not self._items:
                return None
            return self._items.popleft()

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self.get()
            if item is None:
                return
            yield item
