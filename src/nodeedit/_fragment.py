"""Field rows of a graph node and their editable text form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum


class FieldType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def of(cls, value: object) -> FieldType:
        """Classify a decoded JSON value."""
        if value is None:
            return cls.NULL
        # bool은 int의 subclass이므로 먼저 검사
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, list):
            return cls.ARRAY
        if isinstance(value, dict):
            return cls.OBJECT
        raise TypeError(f"not a JSON value: {type(value).__name__}")

    @property
    def is_container(self) -> bool:
        return self in (FieldType.ARRAY, FieldType.OBJECT)


@dataclass(frozen=True)
class FieldRow:
    """One displayed attribute of a node."""

    key: str | None
    value: object
    type: FieldType


def stringify_value(value: object) -> str:
    """String form of a scalar, spelled the way JSON spells it.

    Strings come back unchanged (no quotes), everything else uses its JSON
    literal: ``True`` -> ``true``, ``None`` -> ``null``.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def render_fragment(rows: list[FieldRow] | None) -> str:
    """Render a node's rows as the text shown in (and seeded into) the editor.

    A single unnamed row is shown as the bare value. Anything else becomes a
    pretty-printed object of the named scalar rows; array and object rows are
    left out because they are edited through their own nodes.
    """
    if not rows:
        return "{}"
    if len(rows) == 1 and not rows[0].key:
        return stringify_value(rows[0].value)

    obj: dict[str, object] = {}
    for row in rows:
        if row.type.is_container:
            continue
        if row.key:
            obj[row.key] = row.value
    return json.dumps(obj, indent=2, ensure_ascii=False)


def restore_omitted_rows(
    rows: list[FieldRow] | None, edited: object, existing: object
) -> object:
    """Put back the array/object children that render_fragment left out.

    Only applies when both the edited value and the value in the document are
    objects; existing key order is kept and new keys go last.
    """
    if not rows or not isinstance(edited, dict) or not isinstance(existing, dict):
        return edited
    omitted = {
        row.key
        for row in rows
        if row.key and row.type.is_container and row.key not in edited
    }
    if not omitted:
        return edited

    merged: dict[str, object] = {}
    for key, value in existing.items():
        if key in edited:
            merged[key] = edited[key]
        elif key in omitted:
            merged[key] = value
    for key, value in edited.items():
        merged.setdefault(key, value)
    return merged
