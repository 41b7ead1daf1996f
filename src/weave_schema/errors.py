"""Errors raised while compiling Go declarations into a schema."""

from __future__ import annotations

from pathlib import Path


class WeaveError(Exception):
    """Base class for every compiler failure."""


class ScanError(WeaveError):
    """A directory could not be listed or a source file failed to parse."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"error scanning {self.path}: {reason}")


class UnsupportedTypeError(WeaveError):
    """A field type has no schema data type."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"unsupported type: {kind}")


class TagFormatError(WeaveError):
    """A struct tag literal could not be unquoted."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"error unquoting struct tag: {tag}")


class BuildError(WeaveError):
    """Building a class failed; carries the declaration and, when known, the field."""

    def __init__(self, declaration: str, cause: WeaveError, field: str | None = None) -> None:
        self.declaration = declaration
        self.field = field
        self.cause = cause
        if field is not None:
            message = f"error processing struct {declaration}: field {field}: {cause}"
        else:
            message = f"error processing struct {declaration}: {cause}"
        super().__init__(message)
