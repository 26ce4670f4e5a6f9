"""Unit tests for labeldesk.services.barcode_templates."""

import json
import unittest

from labeldesk.schemas.barcode import BarcodeField
from labeldesk.services.barcode_templates import (
    DEFAULT_DATE_FORMAT,
    InvalidBarcodeStructure,
    default_structure,
    parse_structure,
    serialize_structure,
    template_from_api,
    template_payload,
    unknown_field_types,
)

STRUCTURE = {
    "barcode_type": "gs1-128",
    "barcode_name": "Pallet",
    "fields": [
        {"field_type": "ai", "value": "01"},
        {"field_type": "constanta", "value": "04601234567893"},
        {"field_type": "exp_date"},
        {"field_type": "weight_brutto_pallet", "length": "6", "decimalPlaces": "2"},
        {"field_type": "pallet_number", "length": "4"},
    ],
}


class TestParseStructure(unittest.TestCase):
    def test_from_dict(self) -> None:
        s = parse_structure(STRUCTURE)
        self.assertEqual(s.barcode_type, "gs1-128")
        self.assertEqual(len(s.fields), 5)
        self.assertEqual(s.fields[3].decimal_places, "2")

    def test_from_json_string(self) -> None:
        self.assertEqual(parse_structure(json.dumps(STRUCTURE)), parse_structure(STRUCTURE))

    def test_from_single_quoted_string(self) -> None:
        raw = json.dumps(STRUCTURE).replace('"', "'")
        self.assertEqual(parse_structure(raw), parse_structure(STRUCTURE))

    def test_date_fields_default_format(self) -> None:
        s = parse_structure(STRUCTURE)
        self.assertEqual(s.fields[2].date_format, DEFAULT_DATE_FORMAT)
        kept = parse_structure({"fields": [{"field_type": "production_date", "dateFormat": "yyMMdd"}]})
        self.assertEqual(kept.fields[0].date_format, "yyMMdd")

    def test_rejects_garbage(self) -> None:
        for raw in ("{not json", "[1, 2]", 42, {"fields": [{"value": "1"}]}):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidBarcodeStructure):
                    parse_structure(raw)


class TestSerialize(unittest.TestCase):
    def test_round_trip_uses_camel_case_and_drops_nulls(self) -> None:
        text = serialize_structure(parse_structure(STRUCTURE))
        data = json.loads(text)
        self.assertEqual(data["fields"][0], {"field_type": "ai", "value": "01"})
        self.assertEqual(data["fields"][3]["decimalPlaces"], "2")
        self.assertEqual(data["fields"][2]["dateFormat"], DEFAULT_DATE_FORMAT)
        self.assertEqual(parse_structure(text), parse_structure(STRUCTURE))

    def test_non_ascii_names_kept_readable(self) -> None:
        text = serialize_structure(default_structure("Молоко"))
        self.assertIn("Молоко", text)


class TestTemplates(unittest.TestCase):
    def test_default_structure(self) -> None:
        s = default_structure()
        self.assertEqual(s.barcode_type, "ean13")
        self.assertEqual([(f.field_type, f.value) for f in s.fields], [("constanta", "460")])

    def test_template_from_api(self) -> None:
        t = template_from_api({"id": 9, "name": "Pallet", "structure": json.dumps(STRUCTURE)})
        self.assertEqual(t.id, "9")
        self.assertEqual(t.structure.barcode_name, "Pallet")

    def test_template_without_structure(self) -> None:
        t = template_from_api({"id": 1, "name": None, "structure": None})
        self.assertEqual(t.name, "")
        self.assertEqual(t.structure.fields, [])

    def test_unknown_field_types(self) -> None:
        s = parse_structure({"fields": [{"field_type": "ai"}, {"field_type": "color"}, {"field_type": "exp_date"}]})
        self.assertEqual(unknown_field_types(s), ["color"])

    def test_template_without_id_is_rejected(self) -> None:
        for item in ({"name": "x"}, {"id": None, "structure": {}}, "9"):
            with self.subTest(item=item):
                with self.assertRaises(InvalidBarcodeStructure):
                    template_from_api(item)

    def test_template_reports_unknown_field_types(self) -> None:
        t = template_from_api({"id": 2, "structure": {"fields": [{"field_type": "color"}]}})
        self.assertEqual(t.unknown_field_types, ["color"])


class TestTemplatePayload(unittest.TestCase):
    def test_structure_is_json_string_named_after_template(self) -> None:
        fields = [BarcodeField(field_type="constanta", value="22"), BarcodeField(field_type="exp_date")]
        payload = template_payload("Weight", "ean13", fields)
        self.assertEqual(payload["name"], "Weight")
        structure = json.loads(payload["structure"])
        self.assertEqual(structure["barcode_name"], "Weight")
        self.assertEqual(structure["barcode_type"], "ean13")
        self.assertEqual(structure["fields"][1], {"field_type": "exp_date", "dateFormat": DEFAULT_DATE_FORMAT})

    def test_unknown_field_types_rejected(self) -> None:
        fields = [BarcodeField(field_type="color"), BarcodeField(field_type="size")]
        with self.assertRaises(InvalidBarcodeStructure) as ctx:
            template_payload("X", "ean13", fields)
        self.assertEqual(ctx.exception.message, "Unknown field types: color, size")


if __name__ == "__main__":
    unittest.main()
