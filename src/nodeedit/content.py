"""Document contents and their JSON / JSONL encodings."""

from __future__ import annotations

import json
from enum import Enum


class ContentFormat(Enum):
    JSON = "json"
    JSONL = "jsonl"

    @classmethod
    def from_path(cls, file_path: str) -> ContentFormat:
        return cls.JSONL if file_path.lower().endswith(".jsonl") else cls.JSON


class ContentError(ValueError):
    """Contents could not be decoded in the given format."""


def decode_content(raw: str, fmt: ContentFormat) -> object:
    """Decode raw text into a JSON value. JSONL becomes a list of records."""
    if fmt is ContentFormat.JSONL:
        records: list[object] = []
        for lineno, line in enumerate(raw.split("\n"), start=1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                records.append(json.loads(stripped))
            except json.JSONDecodeError as exc:
                raise ContentError(f"line {lineno}: {exc.msg}") from exc
        return records

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ContentError(
            f"line {exc.lineno} column {exc.colno}: {exc.msg}"
        ) from exc


def encode_content(value: object, fmt: ContentFormat, indent: int = 4) -> str:
    """Encode a JSON value back into text of the given format."""
    if fmt is ContentFormat.JSONL:
        if not isinstance(value, list):
            raise ContentError("JSONL document must be a list of records")
        return "\n".join(json.dumps(rec, ensure_ascii=False) for rec in value)
    return json.dumps(value, indent=indent, ensure_ascii=False)


class ContentStore:
    """In-memory holder of the document text being edited."""

    def __init__(
        self,
        contents: str = "",
        fmt: ContentFormat = ContentFormat.JSON,
        indent: int = 4,
    ) -> None:
        self.contents = contents
        self.format = fmt
        self.indent = indent
        self.has_changes = False

    def get_contents(self) -> str:
        return self.contents

    def get_format(self) -> ContentFormat:
        return self.format

    async def decode(self, raw: str, fmt: ContentFormat) -> object:
        return decode_content(raw, fmt)

    async def encode(self, value: object, fmt: ContentFormat) -> str:
        return encode_content(value, fmt, self.indent)

    def set_contents(self, contents: str, has_changes: bool) -> None:
        self.contents = contents
        self.has_changes = has_changes
