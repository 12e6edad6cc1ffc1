"""Binary compatibility checks for JAR files."""

from .analyzer import Analysis, Analyzer
from .classpath import Classpath
from .field_refs import FieldRefAnalyzer
from .models import ClassDef, FieldDef, FieldRef, JarFile, MethodDef, MethodRef
from .pipeline import analyze_classpath, build_analysis
from .report import Report, ReportSection, ReportTable
from .runtime import CachedRuntimeProvider, RuntimeClassProvider, SnapshotRuntimeProvider
from .shadowed import ShadowedClassesAnalyzer

__all__ = [
    "Analysis",
    "Analyzer",
    "Classpath",
    "ClassDef",
    "FieldDef",
    "FieldRef",
    "JarFile",
    "MethodDef",
    "MethodRef",
    "FieldRefAnalyzer",
    "ShadowedClassesAnalyzer",
    "Report",
    "ReportSection",
    "ReportTable",
    "RuntimeClassProvider",
    "SnapshotRuntimeProvider",
    "CachedRuntimeProvider",
    "analyze_classpath",
    "build_analysis",
]
