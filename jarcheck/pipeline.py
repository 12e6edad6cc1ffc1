"""Wiring of configuration, runtime provider and analyzers."""

from __future__ import annotations

import structlog

from .analyzer import Analysis
from .classpath import Classpath
from .config import AnalysisConfig
from .field_refs import FieldRefAnalyzer
from .report import Report
from .runtime import CachedRuntimeProvider, RuntimeClassProvider, SnapshotRuntimeProvider
from .shadowed import ShadowedClassesAnalyzer
from .storage import load_runtime_snapshot


logger = structlog.get_logger(__name__)


def resolve_runtime(config: AnalysisConfig) -> RuntimeClassProvider:
    if not config.runtime_snapshot:
        logger.warning("runtime_snapshot_missing", hint="set JARCHECK_RUNTIME_SNAPSHOT")
        return SnapshotRuntimeProvider.empty()
    provider = load_runtime_snapshot(config.runtime_snapshot)
    logger.info("runtime_snapshot_loaded", path=config.runtime_snapshot, classes=len(provider))
    return provider


def build_analysis(runtime: RuntimeClassProvider, config: AnalysisConfig | None = None) -> Analysis:
    config = config or AnalysisConfig()
    runtime = CachedRuntimeProvider(runtime)
    return Analysis(
        ShadowedClassesAnalyzer(runtime, max_workers=config.max_workers),
        FieldRefAnalyzer(
            runtime,
            check_final_write=config.check_final_write,
            max_workers=config.max_workers,
        ),
    )


def analyze_classpath(
    classpath: Classpath,
    runtime: RuntimeClassProvider,
    config: AnalysisConfig | None = None,
) -> Report:
    logger.info(
        "analysis_started",
        jar_files=len(classpath),
        classes=sum(len(jar_file.class_defs) for jar_file in classpath.jar_files),
    )
    return build_analysis(runtime, config).run(classpath)
