"""Labels, grouping and call-hierarchy views of resolved items."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from cscope_nav.models import FilePosition, ResolvedItem


def relative_path(file: str, cwd: str | Path) -> str:
    root = str(cwd)
    if file == root or not file.startswith(root.rstrip(os.sep) + os.sep):
        return file
    return os.path.relpath(file, root)


def item_label(item: ResolvedItem) -> str:
    return f"{item.symbol} : {item.trailing_text}"


def item_detail(item: ResolvedItem, cwd: str | Path) -> str:
    return f"{relative_path(item.file, cwd)}:{item.line}:{item.column}"


def sort_items(items: Iterable[ResolvedItem]) -> list[ResolvedItem]:
    return sorted(items, key=lambda i: (i.file, i.line, i.column))


def group_by_file(items: Iterable[ResolvedItem]) -> dict[str, list[ResolvedItem]]:
    """Group items per file, keeping first-seen file order."""
    groups: dict[str, list[ResolvedItem]] = {}
    for item in items:
        groups.setdefault(item.file, []).append(item)
    return groups


def tree_label(item: ResolvedItem) -> str:
    return f"{item.symbol}[{item.line}] {item.trailing_text}"


@dataclass(frozen=True)
class CallHierarchyItem:
    name: str
    detail: str
    position: FilePosition
    length: int


def to_call_hierarchy(items: Sequence[ResolvedItem], cwd: str | Path) -> list[CallHierarchyItem]:
    return [
        CallHierarchyItem(
            name=item.symbol,
            detail=f"[{item_detail(item, cwd)}]{item.line_text}",
            position=item.position,
            length=item.length,
        )
        for item in items
    ]
