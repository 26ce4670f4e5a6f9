"""Pydantic schemas for label documents: canvas plus positioned text/rect/barcode elements."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat
from pydantic.alias_generators import to_camel

ElementType = Literal["text", "rect", "barcode"]
FontWeight = Literal[400, 500, 600, 700]


class _CamelModel(BaseModel):
    """Documents are exchanged with the browser in camelCase (showGrid, fontSize, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LabelCanvas(_CamelModel):
    width: float = 640
    height: float = 360
    background: str = "#0B0F19"
    show_grid: bool = True
    grid_size: float = 16


class LabelElementBase(_CamelModel):
    id: str
    x: float = 0
    y: float = 0
    w: float = 120
    h: float = 40
    rotation: float = Field(default=0, description="Degrees, clockwise")


class TextElement(LabelElementBase):
    type: Literal["text"] = "text"
    text: str = "Текст"
    font_size: float = 18
    color: str = "#E5E7EB"
    font_weight: FontWeight = 600


class RectElement(LabelElementBase):
    type: Literal["rect"] = "rect"
    fill: str = "#111827"
    border_color: str = "#334155"
    border_width: float = 2
    border_radius: float = 12


class BarcodeElement(LabelElementBase):
    type: Literal["barcode"] = "barcode"
    value: str = "0000000000000"


LabelElement = Annotated[
    Union[TextElement, RectElement, BarcodeElement],
    Field(discriminator="type"),
]


class LabelDocument(_CamelModel):
    """Version-1 label document. Later elements render on top of earlier ones."""

    version: Literal[1] = 1
    canvas: LabelCanvas = Field(default_factory=LabelCanvas)
    elements: list[LabelElement] = Field(default_factory=list)


class MoveEdit(BaseModel):
    op: Literal["move"]
    id: str
    x: FiniteFloat
    y: FiniteFloat


class ResizeEdit(BaseModel):
    op: Literal["resize"]
    id: str
    w: FiniteFloat
    h: FiniteFloat


class RotateEdit(BaseModel):
    op: Literal["rotate"]
    id: str
    rotation: FiniteFloat


class DeleteEdit(BaseModel):
    op: Literal["delete"]
    id: str


class LayerEdit(BaseModel):
    op: Literal["layer"]
    id: str
    direction: Literal["up", "down"]


LabelEdit = Annotated[
    Union[MoveEdit, ResizeEdit, RotateEdit, DeleteEdit, LayerEdit],
    Field(discriminator="op"),
]


class EditRequest(BaseModel):
    """Body for POST /labels/edit: a raw document and edits applied in order."""

    document: Any
    edits: list[LabelEdit] = Field(..., max_length=500)


class RenderRequest(BaseModel):
    """Body for POST /labels/render: a raw document and placeholder values."""

    document: Any = Field(..., description="Label document as produced by the designer")
    values: dict[str, str] = Field(
        default_factory=dict,
        description="Placeholder name -> replacement for {{name}} tokens",
    )
