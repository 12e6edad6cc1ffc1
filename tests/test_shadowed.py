from __future__ import annotations

import pytest

from jarcheck.classpath import Classpath
from jarcheck.models import ClassDef, FieldDef, JarFile
from jarcheck.runtime import RuntimeInfo, RuntimeLookupError, SnapshotRuntimeProvider
from jarcheck.shadowed import (
    DIFFERENT_API,
    EXACT_COPY,
    SAME_API,
    ShadowedClassesAnalyzer,
    get_similarity,
)


def _runtime() -> SnapshotRuntimeProvider:
    classes = [
        ClassDef("com.foo.Bar", class_file_checksum="bar-1", class_loader="Bootstrap"),
        ClassDef(
            "java.lang.Runnable",
            superclass=None,
            class_file_checksum="runnable-1",
            class_loader="Bootstrap",
        ),
        ClassDef(
            "javax.xml.Parser",
            fields=(FieldDef("VERSION", "int", static=True),),
            class_file_checksum="parser-1",
            class_loader="Platform",
        ),
    ]
    info = RuntimeInfo(
        java_home="/opt/java",
        name="OpenJDK Runtime Environment",
        java_version="17.0.2",
        java_vendor="Eclipse Adoptium",
    )
    return SnapshotRuntimeProvider.from_class_defs(classes, info=info)


def _rows(classpath: Classpath, max_workers: int = 1) -> list[tuple[str, ...]]:
    section = ShadowedClassesAnalyzer(_runtime(), max_workers=max_workers).analyze(classpath)
    return section.content[0].rows


def test_exact_copy_of_runtime_class():
    jar_file = JarFile("foo.jar", (ClassDef("com/foo/Bar", class_file_checksum="bar-1"),))

    rows = _rows(Classpath([jar_file]))

    assert rows == [("com.foo.Bar", "foo.jar", "Bootstrap", EXACT_COPY)]


def test_similarity_levels():
    jar_file = JarFile(
        "lib.jar",
        (
            ClassDef("java.lang.Runnable", superclass=None, class_file_checksum="runnable-2"),
            ClassDef("javax.xml.Parser", class_file_checksum="parser-2"),
            ClassDef("org.example.Own", class_file_checksum="own-1"),
        ),
    )

    rows = _rows(Classpath([jar_file]))

    assert rows == [
        ("java.lang.Runnable", "lib.jar", "Bootstrap", SAME_API),
        ("javax.xml.Parser", "lib.jar", "Platform", DIFFERENT_API),
    ]


def test_exact_copy_is_never_downgraded():
    class_def = ClassDef("com.foo.Bar", class_file_checksum="same", api_checksum="one")
    runtime_class_def = ClassDef("com.foo.Bar", class_file_checksum="same", api_checksum="two")

    assert get_similarity(class_def, runtime_class_def) == EXACT_COPY


def test_missing_checksums_are_not_an_exact_copy():
    class_def = ClassDef("com.foo.Bar", fields=(FieldDef("x", "int"),))
    runtime_class_def = ClassDef("com.foo.Bar")

    assert get_similarity(class_def, runtime_class_def) == DIFFERENT_API


def test_rows_sorted_by_class_name_within_jar_and_jar_order_kept():
    second = JarFile(
        "z-first.jar",
        (
            ClassDef("javax.xml.Parser", class_file_checksum="parser-1"),
            ClassDef("com.foo.Bar", class_file_checksum="bar-1"),
        ),
    )
    third = JarFile("a-second.jar", (ClassDef("com.foo.Bar", class_file_checksum="other"),))

    rows = _rows(Classpath([second, third]), max_workers=4)

    assert [(row[0], row[1]) for row in rows] == [
        ("com.foo.Bar", "z-first.jar"),
        ("javax.xml.Parser", "z-first.jar"),
        ("com.foo.Bar", "a-second.jar"),
    ]


def test_parallel_and_sequential_runs_match():
    class_defs = tuple(
        ClassDef(name, class_file_checksum="x")
        for name in ["javax.xml.Parser", "com.foo.Bar", "java.lang.Runnable", "org.Own"]
    )
    classpath = Classpath([JarFile("lib.jar", class_defs)])

    assert _rows(classpath, max_workers=1) == _rows(classpath, max_workers=8)


def test_description_includes_runtime_information():
    section = ShadowedClassesAnalyzer(_runtime()).analyze(Classpath([]))

    assert section.title == "Shadowed Classes"
    assert section.description.splitlines() == [
        "Classes shadowing JRE/JDK classes.",
        "Java home   : /opt/java",
        "Java runtime: OpenJDK Runtime Environment",
        "Java version: 17.0.2",
        "Java vendor : Eclipse Adoptium",
    ]
    assert section.content[0].columns == ("Class name", "JAR file", "Class loader", "Similarity")
    assert section.content[0].rows == []


def test_provider_failure_aborts_analysis():
    class BrokenProvider:
        def lookup(self, class_name: str):
            raise RuntimeLookupError(class_name, "snapshot unavailable")

        def runtime_info(self) -> RuntimeInfo:
            return RuntimeInfo()

    classpath = Classpath([JarFile("foo.jar", (ClassDef("com.foo.Bar"),))])

    with pytest.raises(RuntimeLookupError):
        ShadowedClassesAnalyzer(BrokenProvider(), max_workers=2).analyze(classpath)


def test_runtime_is_required():
    with pytest.raises(ValueError):
        ShadowedClassesAnalyzer(None)
