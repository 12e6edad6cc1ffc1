"""Lightweight data models for loaded archives and their classes."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from typing import Iterable


OBJECT_CLASS = "java.lang.Object"


def normalize_class_name(name: str) -> str:
    return name.replace("/", ".")


def _modifiers(access: str, *flags: tuple[str, bool]) -> str:
    words = [access] if access else []
    words.extend(keyword for keyword, enabled in flags if enabled)
    return " ".join(words)


@dataclass(frozen=True)
class FieldDef:
    name: str
    type: str
    access: str = "public"  # public | protected | private | "" (package)
    static: bool = False
    final: bool = False
    volatile: bool = False
    transient: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", normalize_class_name(self.type))

    @property
    def modifiers(self) -> str:
        return _modifiers(
            self.access,
            ("static", self.static),
            ("final", self.final),
            ("transient", self.transient),
            ("volatile", self.volatile),
        )

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.modifiers, self.type, self.name) if part)


@dataclass(frozen=True)
class MethodDef:
    name: str
    descriptor: str
    access: str = "public"
    static: bool = False
    final: bool = False
    abstract: bool = False

    @property
    def modifiers(self) -> str:
        return _modifiers(
            self.access,
            ("abstract", self.abstract),
            ("static", self.static),
            ("final", self.final),
        )


@dataclass(frozen=True, order=True)
class FieldRef:
    """A field access recorded in the bytecode of a using class."""

    owner: str
    name: str
    type: str
    static_access: bool = False
    write_access: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", normalize_class_name(self.owner))
        object.__setattr__(self, "type", normalize_class_name(self.type))

    @property
    def read_access(self) -> bool:
        return not self.write_access

    @property
    def display_name(self) -> str:
        if self.static_access:
            return f"static {self.type} {self.owner}.{self.name}"
        return f"{self.type} {self.owner}.{self.name}"


@dataclass(frozen=True, order=True)
class MethodRef:
    owner: str
    name: str
    descriptor: str
    interface_method: bool = False
    static_access: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", normalize_class_name(self.owner))


@dataclass(frozen=True)
class ClassDef:
    name: str
    superclass: str | None = OBJECT_CLASS
    interfaces: tuple[str, ...] = ()
    fields: tuple[FieldDef, ...] = ()
    methods: tuple[MethodDef, ...] = ()
    field_refs: tuple[FieldRef, ...] = ()
    method_refs: tuple[MethodRef, ...] = ()
    class_file_checksum: str | None = None
    api_checksum: str | None = None
    class_loader: str = ""
    jar_file_name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_class_name(self.name))
        if self.name == OBJECT_CLASS:
            object.__setattr__(self, "superclass", None)
        elif self.superclass:
            object.__setattr__(self, "superclass", normalize_class_name(self.superclass))
        object.__setattr__(
            self, "interfaces", tuple(normalize_class_name(name) for name in self.interfaces)
        )
        for attr in ("fields", "methods", "field_refs", "method_refs"):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))
        if self.api_checksum is None:
            object.__setattr__(self, "api_checksum", compute_api_checksum(self))

    def get_field(self, name: str) -> FieldDef | None:
        for field_def in self.fields:
            if field_def.name == name:
                return field_def
        return None

    def supertypes(self) -> list[str]:
        """Direct supertypes in field lookup order: interfaces, then superclass."""
        names = list(self.interfaces)
        if self.superclass:
            names.append(self.superclass)
        return names


@dataclass(frozen=True)
class JarFile:
    file_name: str
    class_defs: tuple[ClassDef, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        owned = []
        for class_def in self.class_defs:
            if class_def.name in seen:
                raise ValueError(f"Duplicate class {class_def.name} in {self.file_name}")
            seen.add(class_def.name)
            if class_def.jar_file_name != self.file_name:
                class_def = replace(class_def, jar_file_name=self.file_name)
            owned.append(class_def)
        object.__setattr__(self, "class_defs", tuple(owned))


def compute_api_checksum(class_def: ClassDef) -> str:
    """Checksum of the non-private surface of a class.

    Covers the class name, supertypes, and the modifiers and types of every
    non-private field and method. Private members and method bodies do not
    contribute.
    """
    lines = [
        f"class {class_def.name}",
        f"extends {class_def.superclass or ''}",
        f"implements {','.join(sorted(class_def.interfaces))}",
    ]
    lines.extend(sorted(_api_lines(class_def.fields, class_def.methods)))
    digest = hashlib.sha1("\n".join(lines).encode("utf-8"))
    return digest.hexdigest()


def _api_lines(fields: Iterable[FieldDef], methods: Iterable[MethodDef]) -> Iterable[str]:
    for field_def in fields:
        if field_def.access != "private":
            yield f"field {field_def.modifiers} {field_def.type} {field_def.name}"
    for method in methods:
        if method.access != "private":
            yield f"method {method.modifiers} {method.name}{method.descriptor}"
