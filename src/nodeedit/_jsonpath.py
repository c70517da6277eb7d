"""Structural path utilities: formatting, reading and writing by path."""

from __future__ import annotations

NodePath = list[str | int]


class PathError(ValueError):
    """A path segment cannot be applied to the value found at that point."""


def _is_index(segment: object) -> bool:
    return isinstance(segment, int) and not isinstance(segment, bool)


def format_path(path: NodePath | None) -> str:
    """Render a path as ``$["customer"][0]["name"]``.

    Embedded quotes in keys are not escaped.
    """
    if not path:
        return "$"
    segments = [str(seg) if _is_index(seg) else f'"{seg}"' for seg in path]
    return "$[" + "][".join(segments) + "]"


def paths_equal(left: NodePath | None, right: NodePath | None) -> bool:
    """Exact segment-by-segment comparison (``0`` and ``"0"`` differ)."""
    if left is None or right is None:
        return False
    if len(left) != len(right):
        return False
    for a, b in zip(left, right):
        if _is_index(a) != _is_index(b) or a != b:
            return False
    return True


def get_value_at_path(data: object, path: NodePath) -> object:
    """Get the value at a given path in data."""
    current = data
    for key in path:
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and _is_index(key):
            if 0 <= key < len(current):
                current = current[key]
            else:
                return None
        else:
            return None
    return current


def _empty_container_for(segment: str | int) -> list | dict:
    # 다음 segment가 index면 배열, 아니면 객체
    return [] if _is_index(segment) else {}


def _child(container: object, key: str | int) -> object:
    if isinstance(container, dict):
        return container.get(str(key) if _is_index(key) else key)
    if isinstance(container, list):
        _check_index(key)
        return container[key] if key < len(container) else None
    raise PathError(f"cannot descend into {type(container).__name__} at {key!r}")


def _assign(container: object, key: str | int, value: object) -> None:
    if isinstance(container, dict):
        container[str(key) if _is_index(key) else key] = value
    elif isinstance(container, list):
        _check_index(key)
        if key >= len(container):
            container.extend([None] * (key + 1 - len(container)))
        container[key] = value
    else:
        raise PathError(f"cannot assign into {type(container).__name__} at {key!r}")


def _check_index(key: object) -> None:
    if not _is_index(key):
        raise PathError(f"array index must be an integer, got {key!r}")
    if key < 0:
        raise PathError(f"array index must be non-negative, got {key}")


def set_value_at_path(data: object, path: NodePath, value: object) -> None:
    """Write value at path inside data, in place.

    Missing or null intermediate locations are created as an empty array
    when the following segment is an index, otherwise as an empty object.
    The final location is overwritten whatever it held before.
    """
    if not path:
        raise PathError("cannot replace the document root")

    current = data
    for i, key in enumerate(path[:-1]):
        child = _child(current, key)
        if child is None:
            child = _empty_container_for(path[i + 1])
            _assign(current, key, child)
        current = child
    _assign(current, path[-1], value)
