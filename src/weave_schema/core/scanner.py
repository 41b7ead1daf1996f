import logging
from pathlib import Path
from typing import cast

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from weave_schema.core.declarations import (
    AnyType,
    Array,
    FieldDeclaration,
    Map,
    Named,
    Pointer,
    QualifiedName,
    StructLiteral,
    TypeDeclaration,
    TypeExpression,
    Unsupported,
)
from weave_schema.errors import ScanError

logger = logging.getLogger(__name__)

GO_SUFFIX = ".go"


def _get_go_parser() -> Parser:
    return get_parser(cast(SupportedLanguage, "go"))


def list_source_files(directory: str | Path) -> list[Path]:
    """Return the Go files directly inside ``directory`` in lexicographic order."""
    dir_path = Path(directory)
    if not dir_path.is_dir():
        raise ScanError(dir_path, "not a readable directory")
    try:
        entries = list(dir_path.iterdir())
    except OSError as exc:
        raise ScanError(dir_path, str(exc)) from exc
    return sorted(p for p in entries if p.suffix == GO_SUFFIX and p.is_file())


def scan_directory(directory: str | Path) -> list[TypeDeclaration]:
    """Scan every Go file in ``directory`` and return its type declarations in order."""
    parser = _get_go_parser()
    declarations: list[TypeDeclaration] = []
    for path in list_source_files(directory):
        logger.debug("Scanning %s", path)
        try:
            source_bytes = path.read_bytes()
        except OSError as exc:
            raise ScanError(path, str(exc)) from exc
        declarations.extend(scan_source(source_bytes, path, parser))
    return declarations


def scan_source(
    source_bytes: bytes, path: str | Path = "<source>", parser: Parser | None = None
) -> list[TypeDeclaration]:
    """Parse one Go file and return every top-level type declaration in it."""
    try:
        source_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ScanError(path, f"invalid UTF-8 at byte {exc.start}") from exc

    parser = parser or _get_go_parser()
    tree = parser.parse(source_bytes)
    root = tree.root_node
    if root.has_error:
        raise ScanError(path, f"syntax error near line {_first_error_line(root)}")

    package = ""
    declarations: list[TypeDeclaration] = []
    for node in root.named_children:
        if node.type == "package_clause":
            package = _package_name(node)
        elif node.type == "type_declaration":
            group_doc = _doc_comments(node)
            for spec in node.named_children:
                if spec.type not in ("type_spec", "type_alias"):
                    continue
                # Go only attaches a per-spec doc inside a parenthesised group.
                spec_doc = _doc_comments(spec) if _is_grouped(node) else ()
                declarations.append(_type_declaration(package, spec, group_doc, spec_doc))
    return declarations


def _type_declaration(
    package: str, spec: Node, group_doc: tuple[str, ...], spec_doc: tuple[str, ...]
) -> TypeDeclaration:
    name = _text(spec.child_by_field_name("name"))
    type_node = spec.child_by_field_name("type")
    is_record = spec.type == "type_spec" and type_node is not None and type_node.type == "struct_type"
    fields = _struct_fields(type_node) if is_record and type_node is not None else ()
    return TypeDeclaration(
        package=package,
        name=name,
        group_doc=group_doc,
        spec_doc=spec_doc,
        is_record=is_record,
        fields=fields,
    )


def _struct_fields(struct_node: Node) -> tuple[FieldDeclaration, ...]:
    fields: list[FieldDeclaration] = []
    for field_list in struct_node.named_children:
        if field_list.type != "field_declaration_list":
            continue
        for decl in field_list.named_children:
            if decl.type != "field_declaration":
                continue
            type_node = decl.child_by_field_name("type")
            if type_node is None:
                continue
            tag_node = decl.child_by_field_name("tag")
            raw_tag = _text(tag_node) if tag_node is not None else None
            expr = to_type_expression(type_node)
            # `A, B int` is described by its first name only
            name_node = decl.child_by_field_name("name")
            name = _text(name_node) if name_node is not None else None
            fields.append(FieldDeclaration(name=name, type=expr, raw_tag=raw_tag))
    return tuple(fields)


def to_type_expression(node: Node) -> TypeExpression:
    """Convert a tree-sitter Go type node into a ``TypeExpression``."""
    kind = node.type

    if kind == "type_identifier":
        return Named(_text(node))

    if kind == "pointer_type":
        return Pointer(to_type_expression(node.named_children[0]))

    if kind in ("slice_type", "array_type"):
        element = node.child_by_field_name("element")
        if element is None:
            return Unsupported(kind)
        return Array(to_type_expression(element))

    if kind == "qualified_type":
        return QualifiedName(
            namespace=_text(node.child_by_field_name("package")),
            name=_text(node.child_by_field_name("name")),
        )

    if kind == "struct_type":
        return StructLiteral(_struct_fields(node))

    if kind == "map_type":
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if key is None or value is None:
            return Unsupported(kind)
        return Map(to_type_expression(key), to_type_expression(value))

    if kind == "interface_type":
        return AnyType()

    if kind == "parenthesized_type":
        return to_type_expression(node.named_children[0])

    return Unsupported(kind)


# ---------------------------------------------------------------------------
# Doc comments
# ---------------------------------------------------------------------------


def _doc_comments(node: Node) -> tuple[str, ...]:
    """Return the comment group that ends on the line directly above ``node``."""
    lines: list[Node] = []
    expected_end_row = node.start_point[0] - 1
    sibling = _previous(node)
    while sibling is not None and sibling.type == "comment" and sibling.end_point[0] == expected_end_row:
        lines.append(sibling)
        expected_end_row = sibling.start_point[0] - 1
        sibling = _previous(sibling)

    # A comment trailing code on the same line belongs to that code.
    while lines and sibling is not None and sibling.end_point[0] == lines[-1].start_point[0]:
        sibling = _previous(lines.pop())

    return tuple(_text(comment) for comment in reversed(lines))


def _previous(node: Node) -> Node | None:
    # newline terminators are tokens in the Go grammar; skip them
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "\n":
        sibling = sibling.prev_sibling
    return sibling


def _is_grouped(type_declaration: Node) -> bool:
    return any(child.type == "(" for child in type_declaration.children)


def _package_name(package_clause: Node) -> str:
    for child in package_clause.named_children:
        if child.type == "package_identifier":
            return _text(child)
    return ""


def _first_error_line(root: Node) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return root.start_point[0] + 1


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")
