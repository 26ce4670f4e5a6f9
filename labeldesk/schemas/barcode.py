"""Pydantic schemas for barcode templates and EAN-13 helpers."""

from pydantic import BaseModel, ConfigDict, Field


class BarcodeField(BaseModel):
    """One segment of a composite barcode value."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    field_type: str = Field(..., min_length=1, description="constanta, ai, weight_*, date or counter type")
    value: str | None = None
    length: str | None = None
    decimal_places: str | None = Field(default=None, alias="decimalPlaces")
    date_format: str | None = Field(default=None, alias="dateFormat")


class BarcodeStructure(BaseModel):
    """Template structure sent to the barcode generator."""

    model_config = ConfigDict(extra="ignore")

    barcode_type: str = "ean13"
    barcode_name: str = ""
    fields: list[BarcodeField] = Field(default_factory=list)


class BarcodeTemplate(BaseModel):
    id: str
    name: str
    structure: BarcodeStructure
    unknown_field_types: list[str] = Field(
        default_factory=list,
        description="Field types this service does not know how to fill",
    )


class BarcodeTemplateSave(BaseModel):
    """Body for creating or replacing a template; the structure's barcode_name follows name."""

    name: str | None = None
    barcode_type: str = "ean13"
    fields: list[BarcodeField] = Field(default_factory=list)


class BarcodeTemplatesResponse(BaseModel):
    templates: list[BarcodeTemplate]


class BarcodePreviewResponse(BaseModel):
    png: str = Field(..., description="Base64-encoded PNG rendered by the catalog API")


class Ean13Request(BaseModel):
    value: str = Field(..., description="Free-form input; non-digits are ignored")


class Ean13Response(BaseModel):
    """Result of completing an input into an EAN-13 code."""

    input: str
    digits: str = Field(..., description="Input with non-digits removed")
    ean13: str | None = Field(default=None, description="Completed 13-digit code")
    valid: bool = Field(..., description="True when ean13 carries a correct check digit")
