from weave_schema.core.declarations import (
    AnyType,
    Array,
    Map,
    Named,
    Pointer,
    QualifiedName,
    StructLiteral,
    TypeExpression,
    Unsupported,
    is_exported,
)
from weave_schema.errors import UnsupportedTypeError

_SCALAR_TYPES = {
    "string": "text",
    "int": "int",
    "int8": "int",
    "int16": "int",
    "int32": "int",
    "int64": "int",
    "uint": "int",
    "uint8": "int",
    "uint16": "int",
    "uint32": "int",
    "uint64": "int",
    "uintptr": "int",
    "byte": "int",
    "rune": "int",
    "float16": "number",
    "float32": "number",
    "float64": "number",
    "bool": "boolean",
}

# Element types the store can hold natively in an array property
_ARRAY_COMPATIBLE = frozenset({"text", "boolean", "int", "number", "date", "uuid", "object"})

_QUALIFIED_TYPES = {
    ("time", "Time"): "date",
    ("uuid", "UUID"): "uuid",
}


def map_type(expr: TypeExpression) -> list[str]:
    """Map a Go type expression to schema data-type tokens.

    Raises ``UnsupportedTypeError`` for shapes with no schema counterpart.
    """
    if isinstance(expr, Named):
        return [_map_named(expr.name)]

    if isinstance(expr, Pointer):
        return map_type(expr.target)

    if isinstance(expr, Array):
        return _map_array(map_type(expr.element))

    if isinstance(expr, QualifiedName):
        return [_QUALIFIED_TYPES.get((expr.namespace, expr.name), "text")]

    if isinstance(expr, StructLiteral | Map):
        return ["object"]

    if isinstance(expr, AnyType):
        return ["text"]

    if isinstance(expr, Unsupported):
        raise UnsupportedTypeError(expr.kind)

    raise UnsupportedTypeError(type(expr).__name__)


def _map_named(name: str) -> str:
    scalar = _SCALAR_TYPES.get(name)
    if scalar is not None:
        return scalar
    # Exported names are taken as references to other classes; anything else
    # (aliases, enums, ``any``, ``error``) is stored as text.
    if is_exported(name):
        return name
    return "text"


def _map_array(element: list[str]) -> list[str]:
    if len(element) == 1:
        token = element[0]
        if token in _ARRAY_COMPATIBLE:
            return [f"{token}[]"]
        if is_exported(token):
            # reference properties are always multi-valued, so no suffix
            return [token]
    return ["object[]"]
