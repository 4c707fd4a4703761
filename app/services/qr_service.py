"""
QR Code Service

Renders QR codes for arbitrary text or for a short link.

Design Decisions:
- qrcode + Pillow for PNG, qrcode's path-based SVG factory for SVG
- Error correction M and a one-module quiet zone by default
- Four visual styles for PNG; SVG path drawers only cover square and dots
- Foreground colour is configurable; the background is always white
"""

import io
import re
from dataclasses import dataclass
from typing import Optional

import qrcode
from PIL import ImageColor
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError
from qrcode.image.styledpil import StyledPilImage
from qrcode.image.styles.colormasks import SolidFillColorMask
from qrcode.image.styles.moduledrawers import (
    CircleModuleDrawer,
    GappedSquareModuleDrawer,
    RoundedModuleDrawer,
    SquareModuleDrawer,
)
from qrcode.image.styles.moduledrawers import svg as svg_drawers
from qrcode.image.svg import SvgPathImage

from app.core.exceptions import InvalidQROptionsError
from app.core.setting import settings

QR_MARGIN = 1
BACKGROUND_COLOR = "#FFFFFF"
MIN_SIZE = 64
MAX_SIZE = 2048

ERROR_CORRECTION = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

STYLES = ("square", "rounded", "dots", "classy")
# Path drawers only come in square and circle shapes
SVG_STYLES = ("square", "dots")
FORMATS = {"png": "image/png", "svg": "image/svg+xml"}

_COLOR_PATTERN = re.compile(r'^#[0-9a-fA-F]{6}$')


@dataclass(frozen=True)
class QROptions:
    """Validated rendering options."""
    color: str = "#000000"
    style: str = "square"
    error_correction: str = "M"
    size: int = 1024
    format: str = "png"

    def __post_init__(self):
        if not _COLOR_PATTERN.match(self.color):
            raise InvalidQROptionsError("color", self.color)
        if self.style not in STYLES:
            raise InvalidQROptionsError("style", self.style)
        if self.error_correction not in ERROR_CORRECTION:
            raise InvalidQROptionsError("error correction level", self.error_correction)
        if not MIN_SIZE <= self.size <= MAX_SIZE:
            raise InvalidQROptionsError("size", str(self.size))
        if self.format not in FORMATS:
            raise InvalidQROptionsError("format", self.format)
        if self.format == "svg" and self.style not in SVG_STYLES:
            raise InvalidQROptionsError("style for svg", self.style)

    @property
    def media_type(self) -> str:
        return FORMATS[self.format]


def _png_drawer(style: str):
    return {
        "square": SquareModuleDrawer(),
        "rounded": RoundedModuleDrawer(radius_ratio=1),
        "dots": CircleModuleDrawer(),
        "classy": GappedSquareModuleDrawer(),
    }[style]


def _svg_drawer(style: str):
    if style == "dots":
        return svg_drawers.SvgPathCircleDrawer()
    return svg_drawers.SvgPathSquareDrawer()


def _svg_factory(color: str) -> type[SvgPathImage]:
    """SvgPathImage subclass with the fill baked in at class level."""
    return type(
        "ColoredSvgPathImage",
        (SvgPathImage,),
        {
            "QR_PATH_STYLE": {**SvgPathImage.QR_PATH_STYLE, "fill": color},
            "background": BACKGROUND_COLOR,
        },
    )


def render_qr(data: Optional[str], options: QROptions) -> bytes:
    """
    Render ``data`` as a QR code.

    Args:
        data: Text to encode; blank falls back to settings.DEFAULT_QR_DATA
        options: Validated rendering options

    Returns:
        PNG or SVG bytes, per options.format
    """
    payload = (data or "").strip() or settings.DEFAULT_QR_DATA

    qr = qrcode.QRCode(
        border=QR_MARGIN,
        error_correction=ERROR_CORRECTION[options.error_correction],
    )
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError):
        # Payload exceeds version 40 at this error correction level
        raise InvalidQROptionsError("data", f"{len(payload)} characters at level {options.error_correction}")

    buffer = io.BytesIO()

    if options.format == "svg":
        img = qr.make_image(
            image_factory=_svg_factory(options.color),
            module_drawer=_svg_drawer(options.style),
        )
        img.save(buffer)
        return buffer.getvalue()

    # Scale modules so the image is as close to the requested width as possible
    qr.box_size = max(1, options.size // (qr.modules_count + 2 * QR_MARGIN))
    color_mask = SolidFillColorMask(
        back_color=ImageColor.getcolor(BACKGROUND_COLOR, "RGB"),
        front_color=ImageColor.getcolor(options.color, "RGB"),
    )
    img = qr.make_image(
        image_factory=StyledPilImage,
        color_mask=color_mask,
        module_drawer=_png_drawer(options.style),
    )
    img.save(buffer, format="PNG")
    return buffer.getvalue()
