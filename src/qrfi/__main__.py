"""Command line interface for generating Wi-Fi QR codes."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, TextIO

import structlog

from . import __version__
from . import encoder, payload
from .config import AppConfig, load_settings
from .errors import InvalidCredential, IOFailure, QrfiError
from .render import OutputFormat, RenderOptions, Rendered, render as render_matrix

logger = structlog.get_logger("qrfi")

EPILOG = """\
Examples:
  qrfi SSID -p PASSWORD
  qrfi SSID -p PASSWORD -f png > qr.png
  echo SSID | qrfi -p PASSWORD

QR Code is a registered trademark of DENSO WAVE INCORPORATED in Japan and in other countries."""


def build_parser(config: AppConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrfi",
        description="A CLI Wi-Fi QR Code Generator",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("ssid", nargs="?", help="SSID of the Wi-Fi network (or via stdin)")
    parser.add_argument(
        "-t",
        "--authentication-type",
        choices=["WPA", "WEP", "nopass"],
        default="WPA",
        help="Wi-Fi authentication type",
    )
    parser.add_argument("-p", "--password", help="Wi-Fi password (ignored if authentication type is 'nopass')")
    parser.add_argument("-H", "--hidden", action="store_true", help="Mark the SSID as hidden")
    parser.add_argument(
        "-f",
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=config.render.output_format.value,
        help="Output format",
    )
    parser.add_argument(
        "-e",
        "--error-correction",
        choices=["L", "M", "Q", "H"],
        type=str.upper,
        default=config.encode.error_correction,
        help="Error correction level",
    )
    parser.add_argument("--border", type=int, default=config.encode.border, help="Quiet-zone width in modules")
    parser.add_argument("--scale", type=int, default=config.render.scale, help="PNG pixels per module")
    parser.add_argument("--invert", action="store_true", help="Swap dark and light glyphs in ascii output")
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=config.strict,
        help="Enforce SSID length and WPA/WEP key format limits",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(level: int, verbosity: int = 0) -> None:
    """Route structlog and stdlib records for ``qrfi`` to stderr, one level lower per ``-v``."""

    effective = max(logging.DEBUG, level - 10 * verbosity)
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger("qrfi")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(effective)
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def read_ssid(args: argparse.Namespace, stdin: TextIO) -> str:
    if args.ssid is not None:
        return args.ssid
    if stdin.isatty():
        return ""
    logger.debug("ssid_from_stdin")
    try:
        return stdin.readline().rstrip("\r\n")
    except UnicodeDecodeError as exc:
        raise InvalidCredential(f"SSID read from stdin is not valid UTF-8: {exc.reason}") from exc


def resolve_credential(args: argparse.Namespace, stdin: TextIO) -> payload.Credential:
    auth_type = payload.AuthType.parse(args.authentication_type)
    return payload.Credential(
        ssid=read_ssid(args, stdin),
        password=None if auth_type is payload.AuthType.NONE else args.password,
        auth_type=auth_type,
        hidden=args.hidden,
    )


def write_output(rendered: Rendered, stream: TextIO) -> None:
    try:
        if isinstance(rendered, bytes):
            stream.flush()
            stream.buffer.write(rendered)
            stream.buffer.flush()
        else:
            stream.write(rendered + "\n")
            stream.flush()
    except OSError as exc:
        raise IOFailure(f"failed to write output: {exc}") from exc


def run(args: argparse.Namespace, config: AppConfig, stdin: TextIO, stdout: TextIO) -> None:
    credential = resolve_credential(args, stdin)
    if args.strict:
        payload.check_credential(credential)
    wifi_payload = payload.build_payload(credential)
    logger.info(
        "payload_built",
        auth_type=credential.auth_type.name,
        ssid_bytes=len(credential.ssid.encode("utf-8")),
        hidden=credential.hidden,
    )
    try:
        matrix = encoder.encode(wifi_payload, error_correction=args.error_correction, border=args.border)
        options = RenderOptions(scale=args.scale, min_size=config.render.svg_min_size, invert=args.invert)
        rendered = render_matrix(matrix, OutputFormat(args.format), options)
    except ValueError as exc:
        raise QrfiError(str(exc)) from exc
    logger.info("matrix_rendered", modules=matrix.size, output_format=args.format)
    write_output(rendered, stdout)


def main(argv: Optional[list[str]] = None) -> int:
    config = load_settings()
    parser = build_parser(config)
    args = parser.parse_args(argv)
    configure_logging(config.logging.level, args.verbose)
    try:
        run(args, config, sys.stdin, sys.stdout)
    except QrfiError as exc:
        logger.debug("aborted", error=type(exc).__name__)
        parser.exit(1, f"qrfi: error: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
