"""Dot-path helpers shared by the indexer and the query engine.

``flatten`` and ``extract`` use the same addressing: mapping keys and list
indices joined with ``.``. Every pair emitted by ``flatten`` resolves back to
its leaf through ``extract``.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Sequence

SEPARATOR = "."


class _Absent:
    """Marker for a path that resolves to nothing."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_container(value: Any) -> bool:
    return isinstance(value, Mapping) or _is_sequence(value)


def flatten(value: Any, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(path, leaf)`` pairs for every scalar leaf below ``value``.

    ``None`` leaves and empty containers yield nothing. Pairs come out in
    document order; nesting depth is not limited by the interpreter stack.
    """
    stack: list[tuple[Any, str]] = [(value, prefix)]
    while stack:
        current, current_prefix = stack.pop()
        if current is None:
            continue
        if _is_sequence(current):
            children = [
                (element, f"{current_prefix}{index}{SEPARATOR}")
                for index, element in enumerate(current)
            ]
        elif isinstance(current, Mapping):
            children = [
                (element, f"{current_prefix}{key}{SEPARATOR}") for key, element in current.items()
            ]
        else:
            path = current_prefix
            if path.endswith(SEPARATOR):
                path = path[: -len(SEPARATOR)]
            yield path, current
            continue
        stack.extend(reversed(children))


def clone_tree(value: Any) -> Any:
    """Copy nested mappings and sequences into fresh dicts and lists.

    Scalars are shared. Works at any nesting depth.
    """
    if not _is_container(value):
        return value

    def shell(source: Any) -> Any:
        return {} if isinstance(source, Mapping) else []

    root = shell(value)
    stack: list[tuple[Any, Any]] = [(value, root)]
    while stack:
        source, target = stack.pop()
        items = source.items() if isinstance(source, Mapping) else enumerate(source)
        for key, element in items:
            if _is_container(element):
                child = shell(element)
                stack.append((element, child))
            else:
                child = element
            if isinstance(target, dict):
                target[key] = child
            else:
                target.append(child)
    return root


def split_path(path: str) -> list[str]:
    if not path:
        return []
    return path.split(SEPARATOR)


def extract(document: Any, path: str) -> Any:
    """Return the value stored at ``path`` or ``ABSENT`` when there is none.

    The empty path addresses a scalar or sequence root, and the ``""`` key of
    a mapping root, matching what ``flatten`` emits for each.
    """
    segments = split_path(path)
    if not segments and isinstance(document, Mapping):
        segments = [""]
    current = document
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return ABSENT
            current = current[segment]
        elif _is_sequence(current) and segment.isascii() and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return ABSENT
            current = current[index]
        else:
            return ABSENT
    return current
