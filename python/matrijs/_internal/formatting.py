from __future__ import annotations

from typing import Any

from . import runtime as _runtime


def _edge_indices(length: int, edge_items: int) -> tuple[list[int], list[int], bool]:
    if length <= edge_items * 2:
        return list(range(length)), [], False
    head = list(range(edge_items))
    tail = list(range(length - edge_items, length))
    return head, tail, True


def _format_value(value: Any) -> str:
    return f"{float(value):g}"


def _format_matrix_row(
    row: Any,
    col_head: list[int],
    col_tail: list[int],
    truncated: bool,
) -> str:
    entries = [_format_value(row[col]) for col in col_head]
    if truncated:
        entries.append("...")
    entries.extend(_format_value(row[col]) for col in col_tail)
    return " ".join(entries)


def matrix_str(self: Any) -> str:
    rows, cols = self.shape
    header = f"{self.__class__.__name__}(shape=({rows}, {cols}))"

    if rows == 0 or cols == 0:
        return header + "\n[]"

    edge_items = _runtime.settings.edge_items
    row_head, row_tail, rows_truncated = _edge_indices(rows, edge_items)
    col_head, col_tail, cols_truncated = _edge_indices(cols, edge_items)

    lines = [header, "["]
    for row_index in row_head:
        row_repr = _format_matrix_row(self.row(row_index), col_head, col_tail, cols_truncated)
        lines.append(f" [{row_repr}]")
    if rows_truncated:
        lines.append(" ...")
    for row_index in row_tail:
        row_repr = _format_matrix_row(self.row(row_index), col_head, col_tail, cols_truncated)
        lines.append(f" [{row_repr}]")
    lines.append("]")
    return "\n".join(lines)


class MatrixMixin:
    def __str__(self) -> str:
        return matrix_str(self)

    def __repr__(self) -> str:
        shape = getattr(self, "shape", None)
        return f"<{self.__class__.__name__} shape={shape}>"
