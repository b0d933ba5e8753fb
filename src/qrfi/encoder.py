"""QR encoding helpers built on the ``qrcode`` library."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError

from .errors import EncodingFailure

logger = logging.getLogger(__name__)

ModuleRows = Tuple[Tuple[bool, ...], ...]

_ECC_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class QrMatrix:
    """Symbol matrix with the quiet zone included (``True`` is a dark module)."""

    modules: ModuleRows
    border: int
    version: int

    @property
    def size(self) -> int:
        return len(self.modules)

    def is_dark(self, x: int, y: int) -> bool:
        return self.modules[y][x]


def error_correction_level(name: str) -> int:
    try:
        return _ECC_LEVELS[name.upper()]
    except KeyError as exc:
        raise ValueError(f"unknown error correction level: {name}") from exc


def encode(payload: str, *, error_correction: str = "M", border: int = 4) -> QrMatrix:
    """Encode ``payload`` into a :class:`QrMatrix`, letting the library pick the version."""
    if border < 0:
        raise ValueError("border must be zero or a positive integer")
    qr = qrcode.QRCode(
        version=None,
        error_correction=error_correction_level(error_correction),
        border=border,
    )
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        # qrcode 8 reports an exhausted version search as ValueError
        raise EncodingFailure(
            f"payload of {len(payload)} characters does not fit in any QR version"
        ) from exc
    modules = tuple(tuple(bool(cell) for cell in row) for row in qr.get_matrix())
    logger.debug("Encoded QR version %d (%d modules per side)", qr.version, len(modules))
    return QrMatrix(modules=modules, border=border, version=qr.version)
