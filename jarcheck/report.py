"""Report structures shared by all analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ReportTable:
    def __init__(self, *columns: str) -> None:
        self.columns: tuple[str, ...] = tuple(columns)
        self.rows: list[tuple[str, ...]] = []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReportTable):
            return NotImplemented
        return self.columns == other.columns and self.rows == other.rows

    def __repr__(self) -> str:
        return f"ReportTable(columns={self.columns!r}, rows={len(self.rows)})"

    def add_row(self, *cells: str) -> None:
        if len(cells) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} cells, got {len(cells)}")
        self.rows.append(tuple(cells))

    def to_dict(self) -> dict[str, Any]:
        return {"columns": list(self.columns), "rows": [list(row) for row in self.rows]}


@dataclass
class ReportSection:
    title: str
    description: str
    content: list[ReportTable] = field(default_factory=list)

    def add(self, table: ReportTable) -> None:
        self.content.append(table)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "tables": [table.to_dict() for table in self.content],
        }


@dataclass
class Report:
    sections: list[ReportSection] = field(default_factory=list)

    def add_section(self, section: ReportSection) -> None:
        self.sections.append(section)

    def to_dict(self) -> dict[str, Any]:
        return {"sections": [section.to_dict() for section in self.sections]}
