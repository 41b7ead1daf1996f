from weave_schema.core.builder import build_class, build_property
from weave_schema.core.mapper import map_type
from weave_schema.core.scanner import scan_directory, scan_source
from weave_schema.core.schema import assemble_schema, compile_declarations, generate_schema, is_included
from weave_schema.errors import BuildError, ScanError, TagFormatError, UnsupportedTypeError, WeaveError
from weave_schema.models import ClassDefinition, PropertyDefinition, SchemaDocument

__all__ = [
    "BuildError",
    "ClassDefinition",
    "PropertyDefinition",
    "ScanError",
    "SchemaDocument",
    "TagFormatError",
    "UnsupportedTypeError",
    "WeaveError",
    "assemble_schema",
    "build_class",
    "build_property",
    "compile_declarations",
    "generate_schema",
    "is_included",
    "map_type",
    "scan_directory",
    "scan_source",
]
