"""Language-level view of scanned Go type declarations.

These shapes are produced by the scanner and only ever read by the
mapper and the class builder.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Pointer:
    target: TypeExpression


@dataclass(frozen=True)
class Array:
    element: TypeExpression


@dataclass(frozen=True)
class QualifiedName:
    namespace: str
    name: str


@dataclass(frozen=True)
class StructLiteral:
    fields: tuple[FieldDeclaration, ...] = ()


@dataclass(frozen=True)
class Map:
    key: TypeExpression
    value: TypeExpression


@dataclass(frozen=True)
class AnyType:
    pass


@dataclass(frozen=True)
class Unsupported:
    """A type shape with no schema counterpart (function, channel, generic, ...)."""

    kind: str


TypeExpression = Named | Pointer | Array | QualifiedName | StructLiteral | Map | AnyType | Unsupported


def is_exported(name: str) -> bool:
    return name[:1].isupper()


@dataclass(frozen=True)
class FieldDeclaration:
    name: str | None
    type: TypeExpression
    raw_tag: str | None = None

    @property
    def exported(self) -> bool:
        return self.name is not None and is_exported(self.name)


@dataclass(frozen=True)
class TypeDeclaration:
    package: str
    name: str
    group_doc: tuple[str, ...] = ()
    spec_doc: tuple[str, ...] = ()
    is_record: bool = False
    fields: tuple[FieldDeclaration, ...] = ()
