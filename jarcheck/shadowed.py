"""Detection of classpath classes that shadow Java runtime classes."""

from __future__ import annotations

import structlog

from .analyzer import Analyzer
from .classpath import Classpath
from .models import ClassDef, JarFile
from .parallel import ResultCollector, parallel_map
from .report import ReportSection, ReportTable
from .runtime import RuntimeClassProvider


logger = structlog.get_logger(__name__)

EXACT_COPY = "Exact copy"
SAME_API = "Same API"
DIFFERENT_API = "Different API"


def get_similarity(class_def: ClassDef, runtime_class_def: ClassDef) -> str:
    """Compare a classpath class with a runtime class by checksum."""
    checksum = class_def.class_file_checksum
    if checksum is not None and checksum == runtime_class_def.class_file_checksum:
        return EXACT_COPY
    if class_def.api_checksum == runtime_class_def.api_checksum:
        return SAME_API
    return DIFFERENT_API


class ShadowedClassesAnalyzer(Analyzer):
    def __init__(self, runtime: RuntimeClassProvider, max_workers: int = 1) -> None:
        if runtime is None:
            raise ValueError("runtime")
        self.runtime = runtime
        self.max_workers = max_workers

    def analyze(self, classpath: Classpath) -> ReportSection:
        table = self._build_table(classpath)

        info = self.runtime.runtime_info()
        description = "\n".join(
            [
                "Classes shadowing JRE/JDK classes.",
                f"Java home   : {info.java_home}",
                f"Java runtime: {info.name}",
                f"Java version: {info.java_version}",
                f"Java vendor : {info.java_vendor}",
            ]
        )

        section = ReportSection("Shadowed Classes", description)
        section.add(table)
        return section

    def _build_table(self, classpath: Classpath) -> ReportTable:
        table = ReportTable("Class name", "JAR file", "Class loader", "Similarity")
        for jar_file in classpath.jar_files:
            for class_name, (class_loader, similarity) in self._find_shadowed(jar_file):
                table.add_row(class_name, jar_file.file_name, class_loader, similarity)
        return table

    def _find_shadowed(self, jar_file: JarFile) -> list[tuple[str, tuple[str, str]]]:
        shadowed: ResultCollector[str, tuple[str, str]] = ResultCollector()

        def check(class_def: ClassDef) -> None:
            runtime_class_def = self.runtime.lookup(class_def.name)
            if runtime_class_def is None:
                return
            similarity = get_similarity(class_def, runtime_class_def)
            shadowed.add(class_def.name, (runtime_class_def.class_loader, similarity))

        parallel_map(check, jar_file.class_defs, max_workers=self.max_workers)
        if len(shadowed):
            logger.debug("shadowed_classes_found", jar_file=jar_file.file_name, count=len(shadowed))
        return shadowed.sorted_items()
