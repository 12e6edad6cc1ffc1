"""Verification of field references against the classes that declare them.

Field lookup follows the JVM rules: the owner class is searched first, then
its direct superinterfaces (recursively), then its superclass (recursively).
A resolved reference is classified by an ordered list of rules where only
the first matching rule is reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import structlog

from .analyzer import Analyzer
from .classpath import Classpath
from .models import ClassDef, FieldDef, FieldRef
from .parallel import parallel_map
from .report import ReportSection, ReportTable
from .runtime import RuntimeClassProvider


logger = structlog.get_logger(__name__)

FIELD_NOT_FOUND = "Field not found"
INCOMPATIBLE_FIELD_TYPE = "Incompatible field type"
INSTANCE_ACCESS_TO_STATIC_FIELD = "Instance access to static field"
STATIC_ACCESS_TO_INSTANCE_FIELD = "Static access to instance field"
WRITE_ACCESS_TO_FINAL_FIELD = "Write access to final field"


@dataclass(frozen=True)
class FieldResolution:
    referencing_class: str
    field_ref: FieldRef
    field_def: FieldDef | None = None
    declaring_class: str | None = None


@dataclass(frozen=True)
class FieldRule:
    category: str
    applies: Callable[[FieldResolution], bool]
    show_field: bool = True

    def message(self, resolution: FieldResolution) -> str:
        text = f"{self.category}: {resolution.field_ref.display_name}"
        if self.show_field and resolution.field_def is not None:
            text += f" -> {resolution.field_def.display_name}"
        return text


def _writes_final_field(resolution: FieldResolution) -> bool:
    # the declaring class may assign its own final fields in initializers
    return (
        resolution.field_ref.write_access
        and resolution.field_def.final
        and resolution.declaring_class != resolution.referencing_class
    )


FIELD_RULES = (
    FieldRule(FIELD_NOT_FOUND, lambda r: r.field_def is None, show_field=False),
    FieldRule(INCOMPATIBLE_FIELD_TYPE, lambda r: r.field_def.type != r.field_ref.type),
    FieldRule(
        INSTANCE_ACCESS_TO_STATIC_FIELD,
        lambda r: not r.field_ref.static_access and r.field_def.static,
    ),
    FieldRule(
        STATIC_ACCESS_TO_INSTANCE_FIELD,
        lambda r: r.field_ref.static_access and not r.field_def.static,
    ),
    FieldRule(WRITE_ACCESS_TO_FINAL_FIELD, _writes_final_field),
)


def classify(resolution: FieldResolution, rules=FIELD_RULES) -> str | None:
    for rule in rules:
        if rule.applies(resolution):
            return rule.message(resolution)
    return None


class FieldResolver:
    def __init__(self, classpath: Classpath, runtime: RuntimeClassProvider | None = None) -> None:
        self.classpath = classpath
        self.runtime = runtime

    def resolve(self, referencing_class: str, field_ref: FieldRef) -> FieldResolution | None:
        """Resolve a reference, or return None when its owner is not on the classpath."""
        owner = self.classpath.get_class_def(field_ref.owner)
        if owner is None:
            return None
        result = self._find_field(owner, field_ref.name, {owner.name})
        if result is None:
            return FieldResolution(referencing_class, field_ref)
        declaring_class, field_def = result
        return FieldResolution(referencing_class, field_ref, field_def, declaring_class)

    def _find_field(self, class_def: ClassDef, name: str, visited: set[str]):
        field_def = class_def.get_field(name)
        if field_def is not None:
            return class_def.name, field_def

        for supertype in self._supertypes(class_def):
            if supertype in visited:
                continue
            visited.add(supertype)
            super_def = self._get_class_def(supertype)
            if super_def is None:
                # not visible, this branch ends here
                continue
            result = self._find_field(super_def, name, visited)
            if result is not None:
                return result
        return None

    def _supertypes(self, class_def: ClassDef) -> list[str]:
        if self.classpath.get_class_def(class_def.name) is class_def:
            return self.classpath.supertypes(class_def.name)
        return class_def.supertypes()

    def _get_class_def(self, name: str) -> ClassDef | None:
        class_def = self.classpath.get_class_def(name)
        if class_def is None and self.runtime is not None:
            class_def = self.runtime.lookup(name)
        return class_def


class FieldRefAnalyzer(Analyzer):
    def __init__(
        self,
        runtime: RuntimeClassProvider | None = None,
        check_final_write: bool = False,
        max_workers: int = 1,
    ) -> None:
        self.runtime = runtime
        self.check_final_write = check_final_write
        self.max_workers = max_workers

    @property
    def rules(self) -> tuple[FieldRule, ...]:
        if self.check_final_write:
            return FIELD_RULES
        return tuple(rule for rule in FIELD_RULES if rule.category != WRITE_ACCESS_TO_FINAL_FIELD)

    def analyze(self, classpath: Classpath) -> ReportSection:
        table = self._build_table(classpath)
        section = ReportSection("Field References", "References to fields.")
        section.add(table)
        return section

    def _build_table(self, classpath: Classpath) -> ReportTable:
        table = ReportTable("JAR file", "Issues")
        resolver = FieldResolver(classpath, self.runtime)
        rules = self.rules

        def check(class_def: ClassDef) -> list[str]:
            issues = []
            for field_ref in class_def.field_refs:
                resolution = resolver.resolve(class_def.name, field_ref)
                if resolution is None:
                    logger.debug(
                        "field_ref_unverifiable",
                        class_name=class_def.name,
                        field_ref=field_ref.display_name,
                    )
                    continue
                issue = classify(resolution, rules)
                if issue:
                    issues.append(issue)
            return issues

        positions = [
            (index, class_def)
            for index, jar_file in enumerate(classpath.jar_files)
            for class_def in jar_file.class_defs
        ]
        results = parallel_map(
            lambda item: check(item[1]), positions, max_workers=self.max_workers
        )

        issues_by_jar: dict[int, list[str]] = {}
        for (index, _), issues in zip(positions, results):
            issues_by_jar.setdefault(index, []).extend(issues)

        for index, jar_file in enumerate(classpath.jar_files):
            issues = issues_by_jar.get(index)
            if issues:
                table.add_row(jar_file.file_name, "\n".join(issues))
        return table
