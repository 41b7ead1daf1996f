"""Unit tests for building class definitions from declarations."""

import pytest

from weave_schema.core.builder import build_class, build_property, class_settings, lower_first
from weave_schema.core.declarations import (
    Array,
    FieldDeclaration,
    Named,
    Pointer,
    QualifiedName,
    TypeDeclaration,
    Unsupported,
)
from weave_schema.errors import BuildError, TagFormatError, UnsupportedTypeError


def _decl(
    *fields: FieldDeclaration,
    group_doc: tuple[str, ...] = ("// +weave",),
    spec_doc: tuple[str, ...] = (),
) -> TypeDeclaration:
    return TypeDeclaration(
        package="models",
        name="Article",
        group_doc=group_doc,
        spec_doc=spec_doc,
        is_record=True,
        fields=fields,
    )


class TestBuildProperty:
    """Tests for single field handling."""

    def test_lower_camel_name_without_tag(self) -> None:
        prop = build_property(FieldDeclaration(name="PublishedAt", type=QualifiedName("time", "Time")))
        assert prop is not None
        assert prop.name == "publishedAt"
        assert prop.data_type == ["date"]

    def test_json_tag_name_wins(self) -> None:
        prop = build_property(FieldDeclaration(name="Title", type=Named("string"), raw_tag='`json:"headline"`'))
        assert prop is not None
        assert prop.name == "headline"

    def test_json_dash_excludes_field(self) -> None:
        assert build_property(FieldDeclaration(name="Secret", type=Named("string"), raw_tag='`json:"-"`')) is None

    def test_embedded_field_is_skipped(self) -> None:
        assert build_property(FieldDeclaration(name=None, type=Named("Base"))) is None

    def test_unexported_field_is_skipped(self) -> None:
        assert build_property(FieldDeclaration(name="secret", type=Named("string"))) is None

    def test_type_override_replaces_mapping(self) -> None:
        prop = build_property(FieldDeclaration(name="Count", type=Named("int"), raw_tag='`weave:"type=text"`'))
        assert prop is not None
        assert prop.data_type == ["text"]

    def test_type_override_skips_unsupported_mapping(self) -> None:
        field = FieldDeclaration(name="Hook", type=Unsupported("function_type"), raw_tag='`weave:"type=text"`')
        prop = build_property(field)
        assert prop is not None
        assert prop.data_type == ["text"]

    def test_field_config_is_applied(self) -> None:
        tag = (
            '`weave:"description=The body,tokenization=word,'
            'indexFilterable=true,indexSearchable=true,indexInverted=true"`'
        )
        prop = build_property(FieldDeclaration(name="Body", type=Named("string"), raw_tag=tag))
        assert prop is not None
        assert prop.description == "The body"
        assert prop.tokenization == "word"
        assert prop.index_filterable
        assert prop.index_searchable
        assert prop.index_inverted

    @pytest.mark.parametrize("value", ["True", "1", "yes", ""])
    def test_index_flags_only_accept_literal_true(self, value: str) -> None:
        field = FieldDeclaration(name="Body", type=Named("string"), raw_tag=f'`weave:"indexFilterable={value}"`')
        prop = build_property(field)
        assert prop is not None
        assert not prop.index_filterable

    def test_class_reference_array(self) -> None:
        prop = build_property(FieldDeclaration(name="Authors", type=Array(Pointer(Named("Author")))))
        assert prop is not None
        assert prop.data_type == ["Author"]

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            build_property(FieldDeclaration(name="Hook", type=Unsupported("function_type")))


class TestBuildClass:
    """Tests for whole-class building."""

    def test_defaults(self) -> None:
        cls = build_class(_decl())
        assert cls.name == "Article"
        assert cls.package == "models"
        assert cls.description == ""
        assert cls.vector_index_type == "hnsw"
        assert cls.vectorizer == "text2vec-contextionary"
        assert cls.properties == []
        assert cls.module_config is None

    def test_properties_follow_field_order(self) -> None:
        cls = build_class(
            _decl(
                FieldDeclaration(name="Zeta", type=Named("string")),
                FieldDeclaration(name="hidden", type=Named("string")),
                FieldDeclaration(name="Alpha", type=Named("int")),
                FieldDeclaration(name="Mid", type=Named("bool")),
            )
        )
        assert [p.name for p in cls.properties] == ["zeta", "alpha", "mid"]

    def test_config_value_go_rejects_as_number_stays_text(self) -> None:
        cls = build_class(_decl(group_doc=("// +weave", "// +weave:config: vectorizer=1_000")))
        assert cls.vectorizer == "1_000"

    def test_description_from_doc(self) -> None:
        cls = build_class(_decl(group_doc=("// +weave", "// +weave:desc: A news article")))
        assert cls.description == "A news article"

    def test_class_config_is_applied(self) -> None:
        cls = build_class(
            _decl(
                group_doc=(
                    "// +weave",
                    "// +weave:config: vectorizer=none;vectorIndexType=flat;"
                    'moduleConfig={"text2vec-openai": {"skip": true}}',
                )
            )
        )
        assert cls.vectorizer == "none"
        assert cls.vector_index_type == "flat"
        assert cls.module_config == {"text2vec-openai": {"skip": True}}

    def test_spec_doc_config_used_without_group_config(self) -> None:
        cls = build_class(_decl(group_doc=(), spec_doc=("// +weave", "// +weave:config: vectorizer=none")))
        assert cls.vectorizer == "none"

    def test_unsupported_field_raises_build_error(self) -> None:
        decl = _decl(
            FieldDeclaration(name="Title", type=Named("string")),
            FieldDeclaration(name="Hook", type=Unsupported("function_type")),
        )
        with pytest.raises(BuildError) as exc_info:
            build_class(decl)
        assert exc_info.value.declaration == "Article"
        assert exc_info.value.field == "Hook"
        assert isinstance(exc_info.value.cause, UnsupportedTypeError)

    def test_bad_tag_raises_build_error(self) -> None:
        decl = _decl(FieldDeclaration(name="Title", type=Named("string"), raw_tag='"json:\\q"'))
        with pytest.raises(BuildError) as exc_info:
            build_class(decl)
        assert isinstance(exc_info.value.cause, TagFormatError)


class TestClassSettings:
    """Tests for class-level config translation."""

    def test_wrong_kinds_are_ignored(self) -> None:
        settings = class_settings(
            {
                "vectorIndexType": {"kind": "flat"},
                "vectorizer": True,
                "shardingConfig": "lots",
                "replicationConfig": {"factor": 3},
            }
        )
        assert settings == {"replication_config": {"factor": 3}}

    def test_unknown_keys_are_ignored(self) -> None:
        assert class_settings({"color": "blue"}) == {}

    def test_all_map_settings(self) -> None:
        config = {
            "vectorIndexConfig": {"ef": 1},
            "moduleConfig": {"m": 1},
            "shardingConfig": {"s": 1},
            "replicationConfig": {"r": 1},
            "invertedIndexConfig": {"i": 1},
        }
        assert class_settings(config) == {
            "vector_index_config": {"ef": 1},
            "module_config": {"m": 1},
            "sharding_config": {"s": 1},
            "replication_config": {"r": 1},
            "inverted_index_config": {"i": 1},
        }


def test_lower_first() -> None:
    assert lower_first("URL") == "uRL"
    assert lower_first("Title") == "title"
    assert lower_first("") == ""
