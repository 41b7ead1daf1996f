from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel

DEFAULT_VECTOR_INDEX_TYPE = "hnsw"
DEFAULT_VECTORIZER = "text2vec-contextionary"

ConfigMap = dict[str, JsonValue]


def _is_empty(value: Any) -> bool:
    # lists are always kept: "properties": [] and "classes": [] are part of the output
    return value is None or value is False or value == "" or value == {}


class _SchemaModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if not _is_empty(value)}


class PropertyDefinition(_SchemaModel):
    name: str
    data_type: list[str] = Field(min_length=1)
    description: str = ""
    tokenization: str = ""
    index_filterable: bool = False
    index_searchable: bool = False
    index_inverted: bool = False


class ClassDefinition(_SchemaModel):
    package: str = Field(default="", exclude=True)
    name: str = Field(alias="class")
    description: str = ""
    vector_index_type: str = DEFAULT_VECTOR_INDEX_TYPE
    vector_index_config: ConfigMap | None = None
    properties: list[PropertyDefinition] = Field(default_factory=list)
    vectorizer: str = DEFAULT_VECTORIZER
    module_config: ConfigMap | None = None
    sharding_config: ConfigMap | None = None
    replication_config: ConfigMap | None = None
    inverted_index_config: ConfigMap | None = None


class SchemaDocument(_SchemaModel):
    classes: list[ClassDefinition] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, pretty: bool = False) -> str:
        return self.model_dump_json(by_alias=True, indent=2 if pretty else None)
