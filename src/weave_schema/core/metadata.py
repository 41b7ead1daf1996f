"""Comment directives and struct tags.

Declarations opt into the schema with comment markers::

    // +weave
    // +weave:desc: A news article
    // +weave:config: vectorizer=none;vectorIndexConfig={"ef": 64}
    type Article struct {
        Title string `json:"title" weave:"tokenization=word,indexSearchable=true"`
    }

Fields are configured through the ``json`` and ``weave`` sub-tags of their
struct tag.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from pydantic import JsonValue

from weave_schema.errors import TagFormatError
from weave_schema.models import ConfigMap

TAG_NAMESPACE = "weave"
NAME_TAG = "json"

INCLUSION_MARKER = f"+{TAG_NAMESPACE}"
DESCRIPTION_MARKER = f"+{TAG_NAMESPACE}:desc:"
CONFIG_MARKER = f"+{TAG_NAMESPACE}:config:"

EXCLUDE_NAME = "-"

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# one `key:"value"` pair of a conventional struct tag
_TAG_PAIR = re.compile(r' *([^\x00-\x20:"\x7f]+):("(?:[^"\\]|\\.)*")')

_INTERPRETED_BODY = re.compile(
    r'(?:[^"\\\n]|\\(?:[abfnrtv\\"]|x[0-9A-Fa-f]{2}|[0-3][0-7]{2}|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}))*'
)
_ESCAPE = re.compile(r'\\(?:([abfnrtv\\"])|x([0-9A-Fa-f]{2})|([0-3][0-7]{2})|u([0-9A-Fa-f]{4})|U([0-9A-Fa-f]{8}))')
_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}


# ---------------------------------------------------------------------------
# Comment directives
# ---------------------------------------------------------------------------


def has_marker(comments: Sequence[str]) -> bool:
    return any(INCLUSION_MARKER in line for line in comments)


def extract_description(comments: Sequence[str]) -> str:
    """Return the text after the first description marker, or ``""``."""
    for line in comments:
        if DESCRIPTION_MARKER in line:
            return line.split(DESCRIPTION_MARKER, 1)[1].strip()
    return ""


def extract_class_config(comments: Sequence[str]) -> ConfigMap:
    """Collect ``key=value`` pairs from every config-marker line, in order."""
    config: ConfigMap = {}
    for line in comments:
        if CONFIG_MARKER not in line:
            continue
        body = line.split(CONFIG_MARKER, 1)[1].strip()
        for part in body.split(";"):
            if not part:
                continue
            key, sep, value = part.partition("=")
            if not sep:
                continue
            config[key.strip()] = coerce_config_value(value.strip())
    return config


def parse_bool(value: str) -> bool | None:
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    return None


def coerce_config_value(value: str) -> JsonValue:
    """Coerce a raw config value: boolean, then number, then JSON object, then string."""
    as_bool = parse_bool(value)
    if as_bool is not None:
        return as_bool

    number = _parse_float(value)
    if number is not None:
        return number

    if value.startswith("{") and value.endswith("}"):
        try:
            parsed = json.loads(value)
        except ValueError:
            return value
        if isinstance(parsed, dict):
            return parsed

    return value


def _parse_float(value: str) -> float | None:
    # Go rejects digit separators in decimal literals and out-of-range values
    if "_" in value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if math.isinf(number) and value.lstrip("+-").lower() not in ("inf", "infinity"):
        return None
    return number


def resolve_included(group_doc: Sequence[str], spec_doc: Sequence[str]) -> bool:
    return has_marker(group_doc) or has_marker(spec_doc)


def resolve_description(group_doc: Sequence[str], spec_doc: Sequence[str]) -> str:
    return extract_description(group_doc) or extract_description(spec_doc)


def resolve_class_config(group_doc: Sequence[str], spec_doc: Sequence[str]) -> ConfigMap:
    # The two sites are alternatives, never merged.
    return extract_class_config(group_doc) or extract_class_config(spec_doc)


# ---------------------------------------------------------------------------
# Struct tags
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldTag:
    name: str = ""
    config: dict[str, str] = field(default_factory=dict)

    @property
    def excluded(self) -> bool:
        return self.name == EXCLUDE_NAME


def unquote_tag(literal: str) -> str:
    """Unquote a Go string literal as written in source (raw or interpreted)."""
    if len(literal) >= 2 and literal[0] == literal[-1] == "`":
        body = literal[1:-1]
        if "`" in body:
            raise TagFormatError(literal)
        return body.replace("\r", "")

    if len(literal) >= 2 and literal[0] == literal[-1] == '"':
        body = literal[1:-1]
        if not _INTERPRETED_BODY.fullmatch(body):
            raise TagFormatError(literal)
        decoded = _ESCAPE.sub(_decode_escape, body)
        # byte escapes may spell out multi-byte UTF-8 sequences
        return decoded.encode("utf-8", "surrogateescape").decode("utf-8", "surrogateescape")

    raise TagFormatError(literal)


def _decode_escape(match: re.Match[str]) -> str:
    simple, hex_byte, octal, short, long = match.groups()
    if simple:
        return _SIMPLE_ESCAPES[simple]
    if hex_byte or octal:
        return _byte_char(int(hex_byte, 16) if hex_byte else int(octal, 8))
    code = int(short or long, 16)
    if 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
        raise TagFormatError(match.group(0))
    return chr(code)


def _byte_char(value: int) -> str:
    # non-ASCII bytes are carried as lone surrogates until the literal is re-decoded
    return chr(value) if value < 0x80 else chr(0xDC00 + value)


def lookup_tag(tag: str, key: str) -> str:
    """Return the value stored under ``key`` in a conventional struct tag, or ``""``."""
    pos = 0
    while pos < len(tag):
        match = _TAG_PAIR.match(tag, pos)
        if match is None:
            break
        pos = match.end()
        if match.group(1) != key:
            continue
        try:
            return unquote_tag(match.group(2))
        except TagFormatError:
            break
    return ""


def parse_field_tag(raw_tag: str | None) -> FieldTag:
    """Split a field's tag literal into its serialization name and ``weave`` config."""
    if raw_tag is None:
        return FieldTag()

    tag = unquote_tag(raw_tag)
    name = lookup_tag(tag, NAME_TAG).split(",")[0]

    config: dict[str, str] = {}
    weave_tag = lookup_tag(tag, TAG_NAMESPACE)
    if weave_tag:
        for part in weave_tag.split(","):
            pieces = part.split("=")
            if len(pieces) == 2:
                config[pieces[0]] = pieces[1]

    return FieldTag(name=name, config=config)
