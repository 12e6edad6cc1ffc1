"""Lookup of classes supplied by the host Java runtime."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, Protocol

import structlog

from .models import ClassDef, normalize_class_name


logger = structlog.get_logger(__name__)

BOOTSTRAP_CLASS_LOADER = "Bootstrap"


@dataclass(frozen=True)
class RuntimeInfo:
    java_home: str = "unknown"
    name: str = "unknown"
    java_version: str = "unknown"
    java_vendor: str = "unknown"


class RuntimeLookupError(RuntimeError):
    def __init__(self, class_name: str, reason: str) -> None:
        super().__init__(f"Runtime lookup failed for {class_name}: {reason}")
        self.class_name = class_name
        self.reason = reason


class RuntimeClassProvider(Protocol):
    def lookup(self, class_name: str) -> ClassDef | None:
        """Return the runtime class with the given name, or None.

        Must be safe to call from several worker threads at once. Raises
        RuntimeLookupError when the provider cannot answer at all.
        """
        ...

    def runtime_info(self) -> RuntimeInfo: ...


class SnapshotRuntimeProvider:
    """Provider backed by a pre-indexed snapshot of the runtime's classes."""

    def __init__(self, classes: dict[str, ClassDef], info: RuntimeInfo | None = None) -> None:
        self._classes = {normalize_class_name(name): value for name, value in classes.items()}
        self._info = info or RuntimeInfo()

    @classmethod
    def from_class_defs(
        cls,
        class_defs: Iterable[ClassDef],
        info: RuntimeInfo | None = None,
    ) -> "SnapshotRuntimeProvider":
        return cls({class_def.name: class_def for class_def in class_defs}, info=info)

    @classmethod
    def empty(cls) -> "SnapshotRuntimeProvider":
        return cls({})

    def __len__(self) -> int:
        return len(self._classes)

    def lookup(self, class_name: str) -> ClassDef | None:
        return self._classes.get(normalize_class_name(class_name))

    def runtime_info(self) -> RuntimeInfo:
        return self._info


class CachedRuntimeProvider:
    """Memoizes lookups of a slower provider, including misses."""

    def __init__(self, delegate: RuntimeClassProvider) -> None:
        self._delegate = delegate
        self._cache: dict[str, ClassDef | None] = {}
        self._lock = threading.Lock()

    def lookup(self, class_name: str) -> ClassDef | None:
        class_name = normalize_class_name(class_name)
        with self._lock:
            if class_name in self._cache:
                return self._cache[class_name]
        # failures are not cached so a later run can retry
        result = self._delegate.lookup(class_name)
        with self._lock:
            self._cache.setdefault(class_name, result)
        logger.debug("runtime_lookup", class_name=class_name, found=result is not None)
        return result

    def runtime_info(self) -> RuntimeInfo:
        return self._delegate.runtime_info()
