"""Classpath model and the type hierarchy graph built from it."""

from __future__ import annotations

from typing import Iterable, Iterator

import networkx as nx

from .models import ClassDef, JarFile, normalize_class_name


EDGE_EXTENDS = "EXTENDS"
EDGE_IMPLEMENTS = "IMPLEMENTS"


class Classpath:
    """Ordered, read-only collection of JAR files.

    The order of the JAR files is the resolution priority: when a class name
    appears in more than one JAR file, the first occurrence wins.
    """

    def __init__(self, jar_files: Iterable[JarFile]) -> None:
        self._jar_files = tuple(jar_files)
        self._index: dict[str, ClassDef] = {}
        for jar_file in self._jar_files:
            for class_def in jar_file.class_defs:
                self._index.setdefault(class_def.name, class_def)
        self._hierarchy = build_hierarchy(self._index.values())

    @property
    def jar_files(self) -> tuple[JarFile, ...]:
        return self._jar_files

    @property
    def hierarchy(self) -> nx.DiGraph:
        return self._hierarchy

    def __len__(self) -> int:
        return len(self._jar_files)

    def class_defs(self) -> Iterator[ClassDef]:
        for jar_file in self._jar_files:
            yield from jar_file.class_defs

    def get_class_def(self, name: str) -> ClassDef | None:
        return self._index.get(normalize_class_name(name))

    def supertypes(self, name: str) -> list[str]:
        """Direct supertypes of a class: interfaces first, then the superclass."""
        name = normalize_class_name(name)
        if name not in self._hierarchy:
            return []
        return list(self._hierarchy.successors(name))


def build_hierarchy(class_defs: Iterable[ClassDef]) -> nx.DiGraph:
    graph = nx.DiGraph()

    for class_def in class_defs:
        _ensure_node(graph, class_def.name, jar_file=class_def.jar_file_name, external=False)
        graph.nodes[class_def.name].update(jar_file=class_def.jar_file_name, external=False)

        # successor order is the field lookup order
        for interface in class_def.interfaces:
            _ensure_node(graph, interface, jar_file=None, external=True)
            graph.add_edge(class_def.name, interface, type=EDGE_IMPLEMENTS)
        if class_def.superclass:
            _ensure_node(graph, class_def.superclass, jar_file=None, external=True)
            graph.add_edge(class_def.name, class_def.superclass, type=EDGE_EXTENDS)

    return graph


def _ensure_node(graph: nx.DiGraph, node_id: str, **attrs) -> None:
    if node_id not in graph:
        graph.add_node(node_id, **attrs)
