from __future__ import annotations

import os
from typing import Any, Mapping


ENV_EDGE_ITEMS = "MATRIJS_PRINT_EDGE_ITEMS"
ENV_RELAYOUT_WARN_CELLS = "MATRIJS_RELAYOUT_WARN_CELLS"

DEFAULT_EDGE_ITEMS = 4
DEFAULT_RELAYOUT_WARN_CELLS = 1_000_000


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def _check_setting(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


class Settings:
    """Process-wide knobs shared by every matrix.

    Values are read once from the environment when the package is imported
    and can be overridden later with :func:`matrijs.configure`.
    """

    def __init__(self, *, edge_items: int, relayout_warn_cells: int) -> None:
        self.edge_items = _check_setting("edge_items", edge_items)
        self.relayout_warn_cells = _check_setting("relayout_warn_cells", relayout_warn_cells)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            edge_items=_read_int(env, ENV_EDGE_ITEMS, DEFAULT_EDGE_ITEMS),
            relayout_warn_cells=_read_int(
                env, ENV_RELAYOUT_WARN_CELLS, DEFAULT_RELAYOUT_WARN_CELLS
            ),
        )

    def update(self, **overrides: Any) -> None:
        checked: dict[str, int] = {}
        for name, value in overrides.items():
            if name not in ("edge_items", "relayout_warn_cells"):
                raise TypeError(f"unknown setting {name!r}")
            checked[name] = _check_setting(name, value)
        # Apply only once everything validated.
        for name, value in checked.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        return (
            f"Settings(edge_items={self.edge_items}, "
            f"relayout_warn_cells={self.relayout_warn_cells})"
        )


settings = Settings.from_env()


def configure(*, edge_items: int | None = None, relayout_warn_cells: int | None = None) -> None:
    """Override settings for the rest of the process. ``None`` keeps the current value."""
    overrides: dict[str, Any] = {}
    if edge_items is not None:
        overrides["edge_items"] = edge_items
    if relayout_warn_cells is not None:
        overrides["relayout_warn_cells"] = relayout_warn_cells
    settings.update(**overrides)
