from typing import Any

from weave_schema.core.declarations import FieldDeclaration, TypeDeclaration
from weave_schema.core.mapper import map_type
from weave_schema.core.metadata import parse_field_tag, resolve_class_config, resolve_description
from weave_schema.errors import BuildError, WeaveError
from weave_schema.models import ClassDefinition, ConfigMap, PropertyDefinition

_STRING_CLASS_SETTINGS = {
    "vectorIndexType": "vector_index_type",
    "vectorizer": "vectorizer",
}

_MAP_CLASS_SETTINGS = {
    "vectorIndexConfig": "vector_index_config",
    "moduleConfig": "module_config",
    "shardingConfig": "sharding_config",
    "replicationConfig": "replication_config",
    "invertedIndexConfig": "inverted_index_config",
}


def build_class(decl: TypeDeclaration) -> ClassDefinition:
    """Build the class definition for a declaration already marked for inclusion.

    Properties follow field order. Field failures are raised as ``BuildError``
    naming the declaration and the field.
    """
    properties: list[PropertyDefinition] = []
    for field in decl.fields:
        try:
            prop = build_property(field)
        except WeaveError as exc:
            raise BuildError(decl.name, exc, field=field.name) from exc
        if prop is not None:
            properties.append(prop)

    settings: dict[str, Any] = {}
    description = resolve_description(decl.group_doc, decl.spec_doc)
    if description:
        settings["description"] = description
    settings.update(class_settings(resolve_class_config(decl.group_doc, decl.spec_doc)))

    return ClassDefinition(package=decl.package, name=decl.name, properties=properties, **settings)


def build_property(field: FieldDeclaration) -> PropertyDefinition | None:
    """Return the property for ``field``, or ``None`` when the field is not part of the schema."""
    if field.name is None or not field.exported:
        return None

    tag = parse_field_tag(field.raw_tag)
    if tag.excluded:
        return None

    name = tag.name or lower_first(field.name)
    config = dict(tag.config)

    explicit_type = config.pop("type", None)
    data_type = [explicit_type] if explicit_type is not None else map_type(field.type)

    return PropertyDefinition(
        name=name,
        data_type=data_type,
        description=config.get("description", ""),
        tokenization=config.get("tokenization", ""),
        index_filterable=config.get("indexFilterable") == "true",
        index_searchable=config.get("indexSearchable") == "true",
        index_inverted=config.get("indexInverted") == "true",
    )


def class_settings(config: ConfigMap) -> dict[str, Any]:
    """Translate class-level config into ``ClassDefinition`` fields.

    Unknown keys and values of the wrong kind are ignored.
    """
    settings: dict[str, Any] = {}
    for key, value in config.items():
        if key in _STRING_CLASS_SETTINGS and isinstance(value, str):
            settings[_STRING_CLASS_SETTINGS[key]] = value
        elif key in _MAP_CLASS_SETTINGS and isinstance(value, dict):
            settings[_MAP_CLASS_SETTINGS[key]] = value
    return settings


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]
