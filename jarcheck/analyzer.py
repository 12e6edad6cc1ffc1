"""Analyzer contract and the ordered analysis run."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

import structlog

from .classpath import Classpath
from .report import Report, ReportSection


logger = structlog.get_logger(__name__)


class Analyzer(ABC):
    @abstractmethod
    def analyze(self, classpath: Classpath) -> ReportSection:
        """Inspect the classpath and return one report section."""


class Analysis:
    def __init__(self, *analyzers: Analyzer) -> None:
        self.analyzers = list(analyzers)

    def run(self, classpath: Classpath) -> Report:
        report = Report()
        for analyzer in self.analyzers:
            name = type(analyzer).__name__
            started = time.perf_counter()
            # a failing analyzer propagates before its section is added
            section = analyzer.analyze(classpath)
            report.add_section(section)
            logger.info(
                "analyzer_finished",
                analyzer=name,
                section=section.title,
                rows=sum(len(table.rows) for table in section.content),
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        return report
