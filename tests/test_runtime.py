from __future__ import annotations

import threading

import pytest

from jarcheck.models import ClassDef
from jarcheck.parallel import ResultCollector, parallel_map
from jarcheck.runtime import (
    CachedRuntimeProvider,
    RuntimeInfo,
    RuntimeLookupError,
    SnapshotRuntimeProvider,
)


class CountingProvider:
    def __init__(self, classes: dict[str, ClassDef]) -> None:
        self.classes = classes
        self.calls = 0
        self._lock = threading.Lock()

    def lookup(self, class_name: str) -> ClassDef | None:
        with self._lock:
            self.calls += 1
        return self.classes.get(class_name)

    def runtime_info(self) -> RuntimeInfo:
        return RuntimeInfo(java_version="21")


def test_snapshot_lookup_normalizes_names():
    provider = SnapshotRuntimeProvider.from_class_defs([ClassDef("java.lang.String")])

    assert provider.lookup("java/lang/String").name == "java.lang.String"
    assert provider.lookup("java.lang.Missing") is None
    assert len(provider) == 1
    assert provider.runtime_info() == RuntimeInfo()
    assert len(SnapshotRuntimeProvider.empty()) == 0


def test_cached_provider_memoizes_hits_and_misses():
    delegate = CountingProvider({"java.lang.String": ClassDef("java.lang.String")})
    provider = CachedRuntimeProvider(delegate)

    for _ in range(3):
        assert provider.lookup("java/lang/String") is not None
        assert provider.lookup("java.lang.Missing") is None

    assert delegate.calls == 2
    assert provider.runtime_info().java_version == "21"


def test_cached_provider_propagates_failures():
    class BrokenProvider(CountingProvider):
        def lookup(self, class_name: str) -> ClassDef | None:
            raise RuntimeLookupError(class_name, "no snapshot")

    provider = CachedRuntimeProvider(BrokenProvider({}))

    with pytest.raises(RuntimeLookupError) as excinfo:
        provider.lookup("java.lang.String")
    assert excinfo.value.class_name == "java.lang.String"


def test_parallel_map_keeps_input_order():
    assert parallel_map(lambda value: value * 2, range(20), max_workers=4) == [
        value * 2 for value in range(20)
    ]
    assert parallel_map(str, [1, 2], max_workers=1) == ["1", "2"]


def test_result_collector_sorts_concurrent_inserts():
    collector: ResultCollector[str, int] = ResultCollector()
    names = [f"class{index:02d}" for index in range(30)]

    parallel_map(lambda name: collector.add(name, int(name[-2:])), reversed(names), max_workers=8)

    assert len(collector) == 30
    assert [key for key, _ in collector.sorted_items()] == names
