import logging
from collections.abc import Iterable
from pathlib import Path

from weave_schema.core.builder import build_class
from weave_schema.core.declarations import TypeDeclaration
from weave_schema.core.metadata import resolve_included
from weave_schema.core.scanner import scan_directory
from weave_schema.models import ClassDefinition, SchemaDocument

logger = logging.getLogger(__name__)


def is_included(decl: TypeDeclaration) -> bool:
    """A struct is compiled when its group doc or its own doc carries the inclusion marker."""
    return decl.is_record and resolve_included(decl.group_doc, decl.spec_doc)


def assemble_schema(classes: Iterable[ClassDefinition]) -> SchemaDocument:
    # Order is kept and duplicate class names are passed through.
    return SchemaDocument(classes=list(classes))


def compile_declarations(declarations: Iterable[TypeDeclaration]) -> SchemaDocument:
    classes: list[ClassDefinition] = []
    for decl in declarations:
        if not is_included(decl):
            continue
        logger.debug("Building class %s.%s", decl.package, decl.name)
        classes.append(build_class(decl))
    return assemble_schema(classes)


def generate_schema(src_dir: str | Path) -> SchemaDocument:
    """Compile every marked struct in ``src_dir`` into a schema document.

    The first scan or build failure aborts the whole run.
    """
    declarations = scan_directory(src_dir)
    schema = compile_declarations(declarations)
    logger.info(
        "Generated %d class(es) from %d type declaration(s) in %s", len(schema.classes), len(declarations), src_dir
    )
    return schema
