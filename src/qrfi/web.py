from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Dict, Mapping

from flask import Flask, Response, jsonify, request, send_file

from .encoder import encode
from .errors import EncodingFailure, InvalidCredential
from .payload import AuthType, Credential, build_payload
from .render import OutputFormat, RenderOptions, render

logger = logging.getLogger(__name__)

_MIMETYPES = {
    OutputFormat.ASCII: "text/plain",
    OutputFormat.PNG: "image/png",
    OutputFormat.SVG: "image/svg+xml",
}


def _parse_hidden(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise InvalidCredential("hidden must be a boolean (true or false)")


@dataclass
class WifiQRRequest:
    credential: Credential
    output_format: OutputFormat
    error_correction: str
    border: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "WifiQRRequest":
        auth_type = AuthType.parse(str(payload.get("authType") or "WPA"))
        password = payload.get("password")
        credential = Credential(
            ssid=str(payload.get("ssid") or ""),
            password=None if password in (None, "") else str(password),
            auth_type=auth_type,
            hidden=_parse_hidden(payload.get("hidden", False)),
        )

        try:
            output_format = OutputFormat(str(payload.get("format") or "png").lower())
        except ValueError as exc:
            raise ValueError("format must be one of ascii, png or svg") from exc

        error_correction = str(payload.get("errorCorrection") or "M").upper()
        if error_correction not in {"L", "M", "Q", "H"}:
            raise ValueError("errorCorrection must be one of L, M, Q or H")

        try:
            border = int(payload.get("border", 4))
        except (TypeError, ValueError) as exc:
            raise ValueError("border must be an integer") from exc
        if border < 0:
            raise ValueError("border must be zero or a positive integer")

        return cls(
            credential=credential,
            output_format=output_format,
            error_correction=error_correction,
            border=border,
        )


def create_app() -> Flask:
    app = Flask(__name__)

    @app.get("/")
    def index():
        return jsonify(
            {
                "endpoint": "/api/wifi-qr",
                "formats": [fmt.value for fmt in OutputFormat],
                "authTypes": ["WPA", "WEP", "nopass"],
            }
        )

    @app.post("/api/wifi-qr")
    def wifi_qr():
        body: Dict[str, object] = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            body = {}
        try:
            qr_request = WifiQRRequest.from_payload(body)
            wifi_payload = build_payload(qr_request.credential)
        except ValueError as exc:
            return jsonify({"message": str(exc)}), 400

        try:
            matrix = encode(
                wifi_payload,
                error_correction=qr_request.error_correction,
                border=qr_request.border,
            )
        except EncodingFailure as exc:
            logger.info("Rejected oversized payload: %s", exc)
            return jsonify({"message": str(exc)}), 422

        rendered = render(matrix, qr_request.output_format, RenderOptions())
        mimetype = _MIMETYPES[qr_request.output_format]
        if isinstance(rendered, bytes):
            return send_file(io.BytesIO(rendered), mimetype=mimetype)
        return Response(rendered, mimetype=mimetype)

    return app
