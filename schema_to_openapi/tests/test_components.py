"""
Tests for named components and the component registry.
"""

import copy
import unittest

from schema_to_openapi.config import TranslatorConfig
from schema_to_openapi.schema_ast import builder as s
from schema_to_openapi.translator import ComponentRegistry, SchemaTranslator, reference, translate


def geo_point():
    return s.object_(
        {
            "lat": s.number().min(-90).max(90).required(),
            "lon": s.number().min(-180).max(180).required(),
        }
    ).meta(className="GeoPoint")


class TestClassNameComponents(unittest.TestCase):
    def test_nested_component_matches_untagged_translation(self):
        email = s.string().email()
        result = translate(s.object_({"contact": email.meta(className="Email")}))

        self.assertEqual(result.fragment["properties"]["contact"], {"$ref": "#/components/schemas/Email"})
        self.assertEqual(result.components, {"schemas": {"Email": translate(email).fragment}})

    def test_component_defined_once_per_call(self):
        result = translate({"start": geo_point(), "stop": geo_point(), "path": s.array(geo_point())})

        self.assertEqual(
            result.fragment["properties"],
            {
                "start": {"$ref": "#/components/schemas/GeoPoint"},
                "stop": {"$ref": "#/components/schemas/GeoPoint"},
                "path": {"type": "array", "items": {"$ref": "#/components/schemas/GeoPoint"}},
            },
        )
        self.assertEqual(list(result.components["schemas"]), ["GeoPoint"])

    def test_existing_component_short_circuits(self):
        existing = {"schemas": {"GeoPoint": {"type": "object"}}}
        snapshot = copy.deepcopy(existing)

        result = translate(geo_point(), existing)

        self.assertEqual(result.fragment, {"$ref": "#/components/schemas/GeoPoint"})
        self.assertEqual(result.components, {})
        self.assertEqual(existing, snapshot)

    def test_same_reference_across_calls_sharing_a_registry(self):
        first = translate(geo_point())
        second = translate(geo_point(), first.components)

        self.assertEqual(first.fragment, second.fragment)
        self.assertEqual(second.components, {})

    def test_existing_component_in_other_bucket_does_not_match(self):
        result = translate(geo_point(), {"requestBodies": {"GeoPoint": {"type": "object"}}})
        self.assertIn("GeoPoint", result.components["schemas"])

    def test_class_target(self):
        result = translate(s.object_({"subject": s.string()}).meta(className="MessageCreate", classTarget="requestBodies"))
        self.assertEqual(result.fragment, {"$ref": "#/components/requestBodies/MessageCreate"})
        self.assertEqual(
            result.components,
            {"requestBodies": {"MessageCreate": {"type": "object", "properties": {"subject": {"type": "string"}}}}},
        )

    def test_component_includes_annotations_but_not_partial_override(self):
        schema = s.string().description("a tag").meta(className="Tag", swagger={"format": "tag"})
        result = translate(schema)
        self.assertEqual(result.fragment, {"$ref": "#/components/schemas/Tag"})
        self.assertEqual(result.components, {"schemas": {"Tag": {"type": "string", "description": "a tag"}}})

    def test_forbidden_component_is_not_defined(self):
        result = translate(s.object_({"gone": s.string().forbidden().meta(className="Gone")}))
        self.assertEqual(result.components, {})

    def test_later_sibling_sees_earlier_component(self):
        schema = s.object_(
            {
                "first": s.object_({"point": geo_point()}),
                "second": s.alternatives(geo_point()),
                "third": s.any_().valid(geo_point()),
            }
        )
        result = translate(schema)
        ref = {"$ref": "#/components/schemas/GeoPoint"}

        self.assertEqual(result.fragment["properties"]["first"]["properties"]["point"], ref)
        self.assertEqual(result.fragment["properties"]["second"], ref)
        self.assertEqual(result.fragment["properties"]["third"]["oneOf"], [ref])
        self.assertEqual(list(result.components["schemas"]), ["GeoPoint"])

    def test_transitive_components_reach_the_root(self):
        schema = s.array(
            s.alternatives(
                s.object_({"tag": s.string().meta(className="Tag")}).meta(className="Tagged"),
            )
        )
        result = translate(schema)
        self.assertEqual(set(result.components["schemas"]), {"Tag", "Tagged"})

    def test_full_override_skips_component(self):
        schema = s.string().meta(className="Custom", swagger={"type": "string", "format": "uuid"}, swaggerOverride=True)
        result = translate(schema)
        self.assertEqual(result.fragment, {"type": "string", "format": "uuid"})
        self.assertEqual(result.components, {})

    def test_full_override_ignores_forbidden(self):
        schema = s.number().forbidden().meta(swagger={"type": "integer"}).meta(swaggerOverride=True)
        self.assertEqual(translate(schema).fragment, {"type": "integer"})


class TestTranslatorConfig(unittest.TestCase):
    def test_default_class_target(self):
        translator = SchemaTranslator(TranslatorConfig(default_class_target="definitions"))
        result = translator.translate(s.string().meta(className="Name"))
        self.assertEqual(result.fragment, {"$ref": "#/components/definitions/Name"})
        self.assertEqual(result.components, {"definitions": {"Name": {"type": "string"}}})

    def test_ref_prefix(self):
        translator = SchemaTranslator(TranslatorConfig(ref_prefix="shared.yaml#/components"))
        result = translator.translate(s.string().meta(className="Name"))
        self.assertEqual(result.fragment, {"$ref": "shared.yaml#/components/schemas/Name"})

    def test_from_dict_ignores_unknown_keys(self):
        config = TranslatorConfig.from_dict({"indent": 4, "not_an_option": True})
        self.assertEqual(config.indent, 4)
        self.assertFalse(hasattr(config, "not_an_option"))
        self.assertEqual(config.to_dict()["default_class_target"], "schemas")


class TestTranslateComponents(unittest.TestCase):
    def test_batch_shares_components(self):
        batch = SchemaTranslator().translate_components(
            {
                "Trip": s.object_({"start": geo_point(), "stop": geo_point()}),
                "Checkpoint": s.object_({"at": geo_point(), "gone": s.string().forbidden()}),
                "Nothing": s.string().forbidden(),
            }
        )
        ref = {"$ref": "#/components/schemas/GeoPoint"}
        self.assertEqual(batch.fragments["Trip"]["properties"], {"start": ref, "stop": ref})
        self.assertEqual(batch.fragments["Checkpoint"]["properties"], {"at": ref})
        self.assertIsNone(batch.fragments["Nothing"])
        self.assertEqual(list(batch.components["schemas"]), ["GeoPoint"])

    def test_batch_uses_existing_components(self):
        batch = SchemaTranslator().translate_components({"Trip": {"start": geo_point()}}, {"schemas": {"GeoPoint": {}}})
        self.assertEqual(batch.components, {})


class TestComponentRegistry(unittest.TestCase):
    def test_define_once(self):
        registry = ComponentRegistry()
        self.assertTrue(registry.define("schemas", "A", {"type": "string"}))
        self.assertFalse(registry.define("schemas", "A", {"type": "number"}))
        self.assertEqual(registry.get("schemas", "A"), {"type": "string"})
        self.assertEqual(len(registry), 1)

    def test_empty_fragment_counts_as_defined(self):
        registry = ComponentRegistry({"schemas": {"Link": {}}})
        self.assertTrue(registry.has("schemas", "Link"))
        self.assertIn(("schemas", "Link"), registry)

    def test_merged_leaves_inputs_untouched(self):
        left = ComponentRegistry({"schemas": {"A": {}}})
        right = ComponentRegistry({"schemas": {"B": {}}, "requestBodies": {"C": {}}})

        merged = left.merged(right)

        self.assertEqual(merged, {"schemas": {"A": {}, "B": {}}, "requestBodies": {"C": {}}})
        self.assertEqual(left, {"schemas": {"A": {}}})
        self.assertEqual(len(right), 2)

    def test_from_dict_copies(self):
        source = {"schemas": {"A": {}}}
        registry = ComponentRegistry.from_dict(source)
        registry.define("schemas", "B", {})
        self.assertEqual(source, {"schemas": {"A": {}}})
        self.assertEqual(ComponentRegistry.from_dict(None), {})

    def test_empty_registry_is_falsy(self):
        self.assertFalse(ComponentRegistry())
        self.assertFalse(ComponentRegistry({"schemas": {}}))
        self.assertEqual(ComponentRegistry({"schemas": {}}).to_dict(), {})

    def test_reference(self):
        self.assertEqual(reference("schemas", "Email"), {"$ref": "#/components/schemas/Email"})


if __name__ == "__main__":
    unittest.main()
