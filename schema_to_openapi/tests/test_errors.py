import pytest

from schema_to_openapi.schema_ast import SchemaNode
from schema_to_openapi.schema_ast import builder as s
from schema_to_openapi.translator import (
    InvalidInput,
    TranslationError,
    UnrecognizedKind,
    UnrecognizedSchema,
    translate,
)


def test_missing_schema():
    with pytest.raises(InvalidInput, match="No schema was passed"):
        translate(None)


@pytest.mark.parametrize("schema", ["string", 42, [s.string()]])
def test_not_a_schema(schema):
    with pytest.raises(UnrecognizedSchema):
        translate(schema)


def test_unrecognized_kind():
    with pytest.raises(UnrecognizedKind, match="symbol"):
        translate(SchemaNode(kind="symbol"))


def test_nested_failure_aborts_the_whole_call():
    schema = s.object_({"ok": s.string().meta(className="Ok"), "bad": SchemaNode(kind="symbol")})
    with pytest.raises(UnrecognizedKind):
        translate(schema)


def test_unsupported_allowed_value():
    with pytest.raises(UnrecognizedSchema):
        translate(s.any_().valid([1, 2]))


def test_errors_share_a_base_class():
    for error in (InvalidInput, UnrecognizedSchema, UnrecognizedKind):
        assert issubclass(error, TranslationError)
    assert issubclass(InvalidInput, ValueError)
    assert issubclass(UnrecognizedSchema, TypeError)


def test_forbidden_root_is_absent():
    result = translate(s.string().forbidden())
    assert result.fragment is None
    assert result.components == {}
