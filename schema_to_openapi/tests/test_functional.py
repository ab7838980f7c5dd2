import json
from pathlib import Path

import pytest

from schema_to_openapi.schema_ast import SchemaParser
from schema_to_openapi.translator import translate


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "translate_tests.json"
    with open(test_data_path) as f:
        return json.load(f)


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda tc: tc["name"])
def test_translate(test_case):
    """Translate a schema description and compare with the expected fragment"""
    schema = SchemaParser().parse(test_case["schema"])
    result = translate(schema)

    assert result.fragment == test_case["expected"], f"Unexpected fragment for {test_case['name']}:\n{result.fragment}"

    if "components" in test_case:
        assert result.components == test_case["components"]


def test_translated_fragments_are_json_serializable():
    """Every translated fixture can be written out as JSON"""
    for test_case in load_test_data():
        result = translate(SchemaParser().parse(test_case["schema"]))
        json.dumps(result.to_dict())


if __name__ == "__main__":
    pytest.main([__file__])
