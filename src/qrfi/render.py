"""Renderers turning a :class:`~qrfi.encoder.QrMatrix` into printable output."""

from __future__ import annotations

import io
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

from PIL import Image, ImageDraw

from .encoder import QrMatrix
from .svg import qr_matrix_to_svg

Rendered = Union[str, bytes]

# Glyphs indexed by (upper dark, lower dark).
_HALF_BLOCKS = {
    (True, True): "█",
    (True, False): "▀",
    (False, True): "▄",
    (False, False): " ",
}


class OutputFormat(str, Enum):
    ASCII = "ascii"
    PNG = "png"
    SVG = "svg"

    @property
    def is_binary(self) -> bool:
        return self is OutputFormat.PNG


@dataclass(frozen=True)
class RenderOptions:
    scale: int = 10
    min_size: int = 200
    invert: bool = False

    def validate(self) -> None:
        if self.scale <= 0:
            raise ValueError("scale must be a positive integer")
        if self.min_size < 0:
            raise ValueError("min_size must not be negative")


def render_ascii(matrix: QrMatrix, options: RenderOptions) -> str:
    """Draw two module rows per line with Unicode half blocks."""
    rows = [[cell != options.invert for cell in row] for row in matrix.modules]
    if len(rows) % 2:
        rows.append([options.invert] * matrix.size)
    lines = []
    for upper, lower in zip(rows[0::2], rows[1::2]):
        lines.append("".join(_HALF_BLOCKS[pair] for pair in zip(upper, lower)))
    return "\n".join(lines)


def render_png(matrix: QrMatrix, options: RenderOptions) -> bytes:
    box_size = options.scale
    image = Image.new("L", (matrix.size * box_size, matrix.size * box_size), 255)
    draw = ImageDraw.Draw(image)
    for y, row in enumerate(matrix.modules):
        for x, cell in enumerate(row):
            if not cell:
                continue
            left = x * box_size
            top = y * box_size
            draw.rectangle((left, top, left + box_size - 1, top + box_size - 1), fill=0)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_svg(matrix: QrMatrix, options: RenderOptions) -> str:
    return qr_matrix_to_svg(matrix.modules, min_size=options.min_size)


_RENDERERS: Dict[OutputFormat, Callable[[QrMatrix, RenderOptions], Rendered]] = {
    OutputFormat.ASCII: render_ascii,
    OutputFormat.PNG: render_png,
    OutputFormat.SVG: render_svg,
}


def render(matrix: QrMatrix, output_format: OutputFormat, options: RenderOptions = RenderOptions()) -> Rendered:
    options.validate()
    return _RENDERERS[OutputFormat(output_format)](matrix, options)
