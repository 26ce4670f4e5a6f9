"""
Label document model operations: normalization of untrusted JSON, element edits, placeholder rendering.

Documents come from the browser designer (or local storage) and are loosely
validated: every numeric field falls back to a default when missing or
non-finite and is then clamped to its allowed range. Unknown element types are
dropped rather than rejected.
"""

import math
import re
import secrets
import time
from typing import Any, Literal

from labeldesk.schemas.label import (
    BarcodeElement,
    DeleteEdit,
    LabelCanvas,
    LabelDocument,
    LayerEdit,
    MoveEdit,
    RectElement,
    ResizeEdit,
    RotateEdit,
    TextElement,
)
from labeldesk.services.ean13 import make_ean13

LabelEditModel = MoveEdit | ResizeEdit | RotateEdit | DeleteEdit | LayerEdit

# (min, max) ranges; no magic numbers in the normalization logic.
CANVAS_WIDTH_RANGE = (120, 2000)
CANVAS_HEIGHT_RANGE = (80, 2000)
GRID_SIZE_RANGE = (4, 64)
POSITION_RANGE = (-2000, 2000)
SIZE_RANGE = (10, 3000)
ROTATION_RANGE = (-180, 180)
FONT_SIZE_RANGE = (8, 96)
BORDER_WIDTH_RANGE = (0, 16)
BORDER_RADIUS_RANGE = (0, 48)

FONT_WEIGHTS = (400, 500, 600, 700)

DEFAULT_BACKGROUND = "#0B0F19"

PLACEHOLDER_RE = re.compile(r"\{\{\s*([\w.\-]+)\s*\}\}")
_EAN_CANDIDATE_RE = re.compile(r"^[0-9]{12,13}$")


class InvalidLabelDocument(Exception):
    """Raised when input does not have the version-1 document shape."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def new_element_id() -> str:
    """Base-36 millisecond timestamp plus a random suffix, e.g. 'm1x2y3z4_k3j9d0a'."""
    stamp = _to_base36(int(time.time() * 1000))
    return f"{stamp}_{_to_base36(secrets.randbits(36))[:7]}"


def _to_base36(n: int) -> str:
    chars = "0123456789abcdefghijklmnopqrstuvwxyz"
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(chars[r])
    return "".join(reversed(out))


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def _is_finite_number(v: Any) -> bool:
    # bool is an int subclass but never a valid coordinate.
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    try:
        return math.isfinite(v)
    except OverflowError:
        # JSON integers beyond float range count as infinite.
        return False


def _safe_number(v: Any, fallback: float) -> float:
    return v if _is_finite_number(v) else fallback


def _num(raw: dict[str, Any], key: str, fallback: float, bounds: tuple[float, float]) -> float:
    return clamp(_safe_number(raw.get(key), fallback), *bounds)


def _str(raw: dict[str, Any], key: str, fallback: str) -> str:
    v = raw.get(key)
    return v if isinstance(v, str) else fallback


def _round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def default_document() -> LabelDocument:
    """Starter document shown in an empty designer."""
    return LabelDocument(
        canvas=LabelCanvas(
            width=640,
            height=360,
            background=DEFAULT_BACKGROUND,
            show_grid=True,
            grid_size=16,
        ),
        elements=[
            RectElement(
                id=new_element_id(),
                x=32,
                y=32,
                w=280,
                h=120,
                fill="#111827",
                border_color="#334155",
                border_width=2,
                border_radius=14,
            ),
            TextElement(
                id=new_element_id(),
                x=56,
                y=56,
                w=240,
                h=48,
                text="Пример этикетки",
                font_size=20,
                color="#E5E7EB",
                font_weight=700,
            ),
            BarcodeElement(
                id=new_element_id(),
                x=56,
                y=112,
                w=200,
                h=56,
                value="4601234567890",
            ),
        ],
    )


def _normalize_canvas(raw: dict[str, Any]) -> LabelCanvas:
    return LabelCanvas(
        width=_num(raw, "width", 640, CANVAS_WIDTH_RANGE),
        height=_num(raw, "height", 360, CANVAS_HEIGHT_RANGE),
        background=_str(raw, "background", DEFAULT_BACKGROUND),
        show_grid=bool(raw.get("showGrid")),
        grid_size=_num(raw, "gridSize", 16, GRID_SIZE_RANGE),
    )


def _normalize_element(raw: Any) -> TextElement | RectElement | BarcodeElement | None:
    if not isinstance(raw, dict):
        return None
    el_id = raw.get("id")
    el_type = raw.get("type")
    if not isinstance(el_id, str) or not isinstance(el_type, str):
        return None

    base = {
        "id": el_id,
        "x": _num(raw, "x", 0, POSITION_RANGE),
        "y": _num(raw, "y", 0, POSITION_RANGE),
        "w": _num(raw, "w", 120, SIZE_RANGE),
        "h": _num(raw, "h", 40, SIZE_RANGE),
        "rotation": _num(raw, "rotation", 0, ROTATION_RANGE),
    }

    if el_type == "text":
        weight = raw.get("fontWeight")
        return TextElement(
            **base,
            text=_str(raw, "text", "Текст"),
            font_size=_num(raw, "fontSize", 18, FONT_SIZE_RANGE),
            color=_str(raw, "color", "#E5E7EB"),
            font_weight=int(weight) if _is_finite_number(weight) and weight in FONT_WEIGHTS else 600,
        )
    if el_type == "rect":
        return RectElement(
            **base,
            fill=_str(raw, "fill", "#111827"),
            border_color=_str(raw, "borderColor", "#334155"),
            border_width=_num(raw, "borderWidth", 2, BORDER_WIDTH_RANGE),
            border_radius=_num(raw, "borderRadius", 12, BORDER_RADIUS_RANGE),
        )
    if el_type == "barcode":
        return BarcodeElement(**base, value=_str(raw, "value", "0000000000000"))
    return None


def normalize_document(raw: Any) -> LabelDocument:
    """
    Turn untrusted JSON into a valid LabelDocument.

    Raises InvalidLabelDocument when the top-level shape is wrong (not an
    object, version != 1, canvas not an object, elements not a list).
    Invalid elements are dropped; element order is preserved.
    """
    if not isinstance(raw, dict):
        raise InvalidLabelDocument("Label document must be a JSON object.")
    version = raw.get("version")
    if isinstance(version, bool) or version != 1:
        raise InvalidLabelDocument("Unsupported label document version; expected 1.")
    canvas = raw.get("canvas")
    if not isinstance(canvas, dict):
        raise InvalidLabelDocument("Label document canvas must be an object.")
    elements = raw.get("elements")
    if not isinstance(elements, list):
        raise InvalidLabelDocument("Label document elements must be a list.")

    normalized = [_normalize_element(e) for e in elements]
    return LabelDocument(
        canvas=_normalize_canvas(canvas),
        elements=[e for e in normalized if e is not None],
    )


def _replace_element(doc: LabelDocument, element_id: str, **changes: Any) -> LabelDocument:
    elements = [
        e.model_copy(update=changes) if e.id == element_id else e
        for e in doc.elements
    ]
    return doc.model_copy(update={"elements": elements})


def move_element(doc: LabelDocument, element_id: str, x: float, y: float) -> LabelDocument:
    """Place an element at a dragged position (rounded to whole pixels)."""
    return _replace_element(
        doc,
        element_id,
        x=clamp(_round_half_up(x), *POSITION_RANGE),
        y=clamp(_round_half_up(y), *POSITION_RANGE),
    )


def resize_element(doc: LabelDocument, element_id: str, w: float, h: float) -> LabelDocument:
    return _replace_element(
        doc,
        element_id,
        w=clamp(w, *SIZE_RANGE),
        h=clamp(h, *SIZE_RANGE),
    )


def rotate_element(doc: LabelDocument, element_id: str, degrees: float) -> LabelDocument:
    return _replace_element(doc, element_id, rotation=clamp(degrees, *ROTATION_RANGE))


def delete_element(doc: LabelDocument, element_id: str) -> LabelDocument:
    return doc.model_copy(
        update={"elements": [e for e in doc.elements if e.id != element_id]}
    )


def move_layer(
    doc: LabelDocument,
    element_id: str,
    direction: Literal["up", "down"],
) -> LabelDocument:
    """
    Bring an element forward ("up") or send it backward ("down") by one step.

    Elements later in the list render on top. Unknown ids and moves past
    either end leave the document unchanged.
    """
    idx = next((i for i, e in enumerate(doc.elements) if e.id == element_id), -1)
    if idx < 0:
        return doc
    next_idx = idx + 1 if direction == "up" else idx - 1
    if next_idx < 0 or next_idx >= len(doc.elements):
        return doc
    elements = list(doc.elements)
    item = elements.pop(idx)
    elements.insert(next_idx, item)
    return doc.model_copy(update={"elements": elements})


def apply_edit(doc: LabelDocument, edit: LabelEditModel) -> LabelDocument:
    if isinstance(edit, MoveEdit):
        return move_element(doc, edit.id, edit.x, edit.y)
    if isinstance(edit, ResizeEdit):
        return resize_element(doc, edit.id, edit.w, edit.h)
    if isinstance(edit, RotateEdit):
        return rotate_element(doc, edit.id, edit.rotation)
    if isinstance(edit, DeleteEdit):
        return delete_element(doc, edit.id)
    return move_layer(doc, edit.id, edit.direction)


def apply_edits(doc: LabelDocument, edits: list[LabelEditModel]) -> LabelDocument:
    """Apply designer edits in order; edits naming an unknown element id change nothing."""
    for edit in edits:
        doc = apply_edit(doc, edit)
    return doc


def substitute_placeholders(template: str, values: dict[str, str]) -> str:
    """Replace {{name}} tokens from *values*; unknown names are left untouched."""

    def _sub(m: re.Match[str]) -> str:
        name = m.group(1)
        return values[name] if name in values else m.group(0)

    return PLACEHOLDER_RE.sub(_sub, template)


def render_document(doc: LabelDocument, values: dict[str, str]) -> LabelDocument:
    """
    Fill placeholders in text and barcode elements for printing.

    Barcode values that end up as 12 or 13 plain digits are completed into
    EAN-13 codes; other barcode values (Code 128, GS1 strings) pass through.
    """
    rendered = []
    for el in doc.elements:
        if isinstance(el, TextElement):
            el = el.model_copy(update={"text": substitute_placeholders(el.text, values)})
        elif isinstance(el, BarcodeElement):
            value = substitute_placeholders(el.value, values).strip()
            if _EAN_CANDIDATE_RE.match(value):
                value = make_ean13(value) or value
            el = el.model_copy(update={"value": value})
        rendered.append(el)
    return doc.model_copy(update={"elements": rendered})
