"""Wi-Fi credential to QR code toolkit."""

__version__ = "0.1.0"

from .encoder import QrMatrix, encode
from .errors import EncodingFailure, InvalidCredential, IOFailure, QrfiError
from .payload import AuthType, Credential, build_payload, check_credential, escape
from .render import OutputFormat, RenderOptions, render

__all__ = [
    "AuthType",
    "Credential",
    "EncodingFailure",
    "IOFailure",
    "InvalidCredential",
    "OutputFormat",
    "QrMatrix",
    "QrfiError",
    "RenderOptions",
    "build_payload",
    "check_credential",
    "encode",
    "escape",
    "render",
]
