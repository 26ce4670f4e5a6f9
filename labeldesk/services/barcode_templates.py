"""Barcode template structures: field catalogue, parsing of API payloads, serialization."""

import json
from typing import Any

from pydantic import ValidationError

from labeldesk.schemas.barcode import BarcodeField, BarcodeStructure, BarcodeTemplate

CONSTANT_FIELD = "constanta"
AI_FIELD = "ai"

WEIGHT_FIELDS = frozenset(
    {
        "weight_netto_pack",
        "weight_brutto_pack",
        "weight_netto_box",
        "weight_brutto_box",
        "weight_netto_pallet",
        "weight_brutto_pallet",
        "weight_brutto_all",
    }
)
DATE_FIELDS = frozenset({"production_date", "exp_date"})
COUNTER_FIELDS = frozenset(
    {
        "pack_number",
        "box_number",
        "pallet_number",
        "article",
        "pack_count",
        "box_count",
        "batch_number",
    }
)

FIELD_TYPES = frozenset({CONSTANT_FIELD, AI_FIELD}) | WEIGHT_FIELDS | DATE_FIELDS | COUNTER_FIELDS

DEFAULT_DATE_FORMAT = "ddMMyy"


class InvalidBarcodeStructure(Exception):
    """Raised when a template structure cannot be parsed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def default_structure(name: str = "") -> BarcodeStructure:
    """New-template form state: an EAN-13 starting with the 460 country prefix."""
    return BarcodeStructure(
        barcode_type="ean13",
        barcode_name=name,
        fields=[BarcodeField(field_type=CONSTANT_FIELD, value="460")],
    )


def parse_structure(raw: Any) -> BarcodeStructure:
    """
    Parse a structure from a dict or a JSON string.

    Some API responses carry the structure as a Python-repr string with
    single quotes; those are retried with quotes swapped.
    """
    data = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            try:
                data = json.loads(raw.replace("'", '"'))
            except json.JSONDecodeError as e:
                raise InvalidBarcodeStructure(f"Structure is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise InvalidBarcodeStructure("Structure must be a JSON object.")
    try:
        structure = BarcodeStructure.model_validate(data)
    except ValidationError as e:
        raise InvalidBarcodeStructure(f"Invalid structure: {e.errors()[0]['msg']}") from e
    return _with_field_defaults(structure)


def _with_field_defaults(structure: BarcodeStructure) -> BarcodeStructure:
    fields = [
        f.model_copy(update={"date_format": DEFAULT_DATE_FORMAT})
        if f.field_type in DATE_FIELDS and not f.date_format
        else f
        for f in structure.fields
    ]
    return structure.model_copy(update={"fields": fields})


def structure_payload(structure: BarcodeStructure) -> dict[str, Any]:
    """Structure as the JSON object the barcode generator expects (camelCase field options)."""
    return structure.model_dump(by_alias=True, exclude_none=True)


def serialize_structure(structure: BarcodeStructure) -> str:
    """JSON string stored in a template's structure column by the external API."""
    return json.dumps(structure_payload(structure), ensure_ascii=False)


def unknown_field_types(structure: BarcodeStructure) -> list[str]:
    """Field types not in the known catalogue, in order of appearance."""
    return [f.field_type for f in structure.fields if f.field_type not in FIELD_TYPES]


def template_from_api(item: dict[str, Any]) -> BarcodeTemplate:
    """Map an API list item ({id, name, structure}) to a BarcodeTemplate."""
    if not isinstance(item, dict) or item.get("id") is None:
        raise InvalidBarcodeStructure("Template item has no id.")
    structure = parse_structure(item.get("structure") or {})
    return BarcodeTemplate(
        id=str(item["id"]),
        name=str(item.get("name") or ""),
        structure=structure,
        unknown_field_types=unknown_field_types(structure),
    )


def template_payload(name: str, barcode_type: str, fields: list[BarcodeField]) -> dict[str, Any]:
    """
    Create/update body for the barcodes resource: ``{name, structure}`` with the
    structure as a JSON string whose barcode_name repeats the template name.

    Raises InvalidBarcodeStructure when a field type is not in FIELD_TYPES.
    """
    structure = _with_field_defaults(
        BarcodeStructure(barcode_type=barcode_type, barcode_name=name, fields=fields)
    )
    unknown = unknown_field_types(structure)
    if unknown:
        raise InvalidBarcodeStructure(f"Unknown field types: {', '.join(unknown)}")
    return {"name": name, "structure": serialize_structure(structure)}
