"""Bounded worker-pool fan-out used inside the analyzers."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Generic, Iterable, TypeVar


T = TypeVar("T")
R = TypeVar("R")
K = TypeVar("K")
V = TypeVar("V")


def parallel_map(
    fn: Callable[[T], R],
    items: Iterable[T],
    max_workers: int = 1,
) -> list[R]:
    """Apply fn to every item and return the results in input order.

    Exceptions raised by fn propagate to the caller.
    """
    items = list(items)
    if max_workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(
        max_workers=min(max_workers, len(items)),
        thread_name_prefix="jarcheck-worker",
    ) as executor:
        return list(executor.map(fn, items))


class ResultCollector(Generic[K, V]):
    """Append-only (key, value) collection safe for concurrent insertion."""

    def __init__(self) -> None:
        self._items: list[tuple[K, V]] = []
        self._lock = threading.Lock()

    def add(self, key: K, value: V) -> None:
        with self._lock:
            self._items.append((key, value))

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def sorted_items(self) -> list[tuple[K, V]]:
        with self._lock:
            items = list(self._items)
        return sorted(items, key=lambda item: item[0])
