"""JSON documents for classpaths, runtime snapshots and reports."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .classpath import Classpath
from .models import ClassDef, FieldDef, FieldRef, JarFile, MethodDef, MethodRef
from .report import Report
from .runtime import BOOTSTRAP_CLASS_LOADER, RuntimeInfo, SnapshotRuntimeProvider


class ClasspathFormatError(ValueError):
    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Invalid document at {location}: {reason}")
        self.location = location
        self.reason = reason


def classpath_from_dict(data: Any) -> Classpath:
    jar_entries = _require(data, "jar_files", list, "$")
    jar_files = []
    for index, entry in enumerate(jar_entries):
        location = f"$.jar_files[{index}]"
        file_name = _require(entry, "file_name", str, location)
        classes = _parse_classes(entry.get("classes", []), f"{location}.classes")
        try:
            jar_files.append(JarFile(file_name, tuple(classes)))
        except ValueError as exc:
            raise ClasspathFormatError(location, str(exc)) from exc
    return Classpath(jar_files)


def classpath_to_dict(classpath: Classpath) -> dict[str, Any]:
    return {
        "jar_files": [
            {
                "file_name": jar_file.file_name,
                "classes": [class_def_to_dict(class_def) for class_def in jar_file.class_defs],
            }
            for jar_file in classpath.jar_files
        ]
    }


def load_classpath(path: str | Path) -> Classpath:
    return classpath_from_dict(_read_json(path))


def save_classpath(classpath: Classpath, path: str | Path) -> None:
    Path(path).write_text(json.dumps(classpath_to_dict(classpath), indent=2), encoding="utf-8")


def runtime_from_dict(data: Any) -> SnapshotRuntimeProvider:
    if not isinstance(data, dict):
        raise ClasspathFormatError("$", "expected an object")
    runtime = data.get("runtime") or {}
    if not isinstance(runtime, dict):
        raise ClasspathFormatError("$.runtime", "expected an object")
    info = RuntimeInfo(
        java_home=str(runtime.get("java_home", "unknown")),
        name=str(runtime.get("name", "unknown")),
        java_version=str(runtime.get("java_version", "unknown")),
        java_vendor=str(runtime.get("java_vendor", "unknown")),
    )
    class_loader = data.get("class_loader") or BOOTSTRAP_CLASS_LOADER
    classes = _parse_classes(
        data.get("classes", []), "$.classes", default_class_loader=class_loader
    )
    return SnapshotRuntimeProvider.from_class_defs(classes, info=info)


def load_runtime_snapshot(path: str | Path) -> SnapshotRuntimeProvider:
    return runtime_from_dict(_read_json(path))


def save_report(report: Report, path: str | Path) -> None:
    Path(path).write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")


def class_def_to_dict(class_def: ClassDef) -> dict[str, Any]:
    return {
        "name": class_def.name,
        "superclass": class_def.superclass,
        "interfaces": list(class_def.interfaces),
        "fields": [asdict(field_def) for field_def in class_def.fields],
        "methods": [asdict(method) for method in class_def.methods],
        "field_refs": [asdict(ref) for ref in class_def.field_refs],
        "method_refs": [asdict(ref) for ref in class_def.method_refs],
        "class_file_checksum": class_def.class_file_checksum,
        "api_checksum": class_def.api_checksum,
        "class_loader": class_def.class_loader,
    }


def _parse_classes(
    entries: Any,
    location: str,
    default_class_loader: str = "",
) -> list[ClassDef]:
    if not isinstance(entries, list):
        raise ClasspathFormatError(location, "expected a list")
    return [
        _parse_class(entry, f"{location}[{index}]", default_class_loader)
        for index, entry in enumerate(entries)
    ]


def _parse_class(entry: Any, location: str, default_class_loader: str) -> ClassDef:
    name = _require(entry, "name", str, location)
    superclass = entry.get("superclass", "java.lang.Object")
    if superclass is not None and not isinstance(superclass, str):
        raise ClasspathFormatError(f"{location}.superclass", "expected str or null")
    interfaces = entry.get("interfaces", [])
    if not isinstance(interfaces, list) or not all(isinstance(item, str) for item in interfaces):
        raise ClasspathFormatError(f"{location}.interfaces", "expected a list of str")
    for key in ("field_refs", "method_refs"):
        _check_ref_owners(entry.get(key), f"{location}.{key}")
    try:
        return ClassDef(
            name=name,
            superclass=superclass,
            interfaces=tuple(interfaces),
            fields=tuple(FieldDef(**item) for item in entry.get("fields", ())),
            methods=tuple(MethodDef(**item) for item in entry.get("methods", ())),
            field_refs=tuple(FieldRef(**item) for item in entry.get("field_refs", ())),
            method_refs=tuple(MethodRef(**item) for item in entry.get("method_refs", ())),
            class_file_checksum=entry.get("class_file_checksum"),
            api_checksum=entry.get("api_checksum"),
            class_loader=entry.get("class_loader") or default_class_loader,
        )
    except (TypeError, AttributeError) as exc:
        raise ClasspathFormatError(location, str(exc)) from exc


def _check_ref_owners(refs: Any, location: str) -> None:
    if not isinstance(refs, list):
        return
    for index, ref in enumerate(refs):
        if isinstance(ref, dict) and not isinstance(ref.get("owner"), str):
            raise ClasspathFormatError(f"{location}[{index}].owner", "expected str")


def _require(data: Any, key: str, expected: type, location: str) -> Any:
    if not isinstance(data, dict):
        raise ClasspathFormatError(location, "expected an object")
    value = data.get(key)
    if not isinstance(value, expected):
        raise ClasspathFormatError(f"{location}.{key}", f"expected {expected.__name__}")
    return value


def _read_json(path: str | Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ClasspathFormatError(str(path), f"not valid JSON ({exc.msg})") from exc
