"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from jsonfinder.index.search import DEFAULT_ID_FIELD
from jsonfinder.ingestion.jsonl_loader import DEFAULT_SUFFIXES


@dataclass(slots=True)
class AppConfig:
    id_field: str = DEFAULT_ID_FIELD
    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES
    encoding: str = "utf-8"
    default_operator: str = "AND"
    max_results: int = 1000

    def __post_init__(self) -> None:
        self.suffixes = tuple(
            suffix if suffix.startswith(".") else f".{suffix}" for suffix in self.suffixes
        )

    def resolve_paths(self, paths: Iterable[Path], base_dir: Path | None = None) -> list[Path]:
        resolved: list[Path] = []
        for path in paths:
            path = Path(path).expanduser()
            if path.is_absolute() or base_dir is None:
                resolved.append(path)
            else:
                resolved.append(base_dir / path)
        return resolved
