"""Wi-Fi credential model and payload serialization."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidCredential

_SPECIAL_CHARACTERS = '\\;,"'
_ESCAPE_TABLE = str.maketrans({char: "\\" + char for char in _SPECIAL_CHARACTERS})

_NO_AUTH_ALIASES = {"", "NONE", "NOPASS", "OPEN"}
_HEX_DIGITS = set(string.hexdigits)
MAX_SSID_BYTES = 32


class AuthType(str, Enum):
    WPA = "WPA"
    WEP = "WEP"
    NONE = "nopass"

    @property
    def tag(self) -> str:
        """Value written to the ``T:`` field."""
        return "" if self is AuthType.NONE else self.name

    @property
    def requires_password(self) -> bool:
        return self is not AuthType.NONE

    @classmethod
    def parse(cls, value: str) -> "AuthType":
        normalized = value.strip().upper()
        if normalized in _NO_AUTH_ALIASES:
            return cls.NONE
        try:
            return cls[normalized]
        except KeyError as exc:
            raise InvalidCredential(
                f"unsupported authentication type {value!r} (expected WPA, WEP or nopass)"
            ) from exc


@dataclass(frozen=True)
class Credential:
    ssid: str
    password: Optional[str] = None
    auth_type: AuthType = AuthType.WPA
    hidden: bool = False


def escape(value: str) -> str:
    """Backslash-escape ``\\``, ``;``, ``,`` and ``"`` in a single pass.

    Existing backslashes are escaped like any other special character, so
    ``a\\;b`` becomes ``a\\\\\\;b`` rather than being treated as pre-escaped.
    """
    return value.translate(_ESCAPE_TABLE)


def validate(credential: Credential) -> None:
    """Raise :class:`InvalidCredential` when required fields are missing or not UTF-8 encodable."""
    if not credential.ssid or not credential.ssid.strip():
        raise InvalidCredential("SSID cannot be empty.")
    if credential.auth_type.requires_password and not credential.password:
        raise InvalidCredential(
            f"a password is required for {credential.auth_type.name} networks."
        )
    fields = [("SSID", credential.ssid)]
    if credential.auth_type.requires_password:
        fields.append(("password", credential.password))
    for label, value in fields:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidCredential(f"{label} is not valid UTF-8 text.") from exc


def build_payload(credential: Credential) -> str:
    """Return the ``WIFI:`` payload string for ``credential``.

    Fields are written in the order T, S, P, H. The password segment is
    dropped for open networks and the hidden flag only appears when set.
    """
    validate(credential)
    fields = [
        f"T:{credential.auth_type.tag}",
        f"S:{escape(credential.ssid)}",
    ]
    if credential.auth_type.requires_password:
        fields.append(f"P:{escape(credential.password)}")
    if credential.hidden:
        fields.append("H:true")
    return "WIFI:" + "".join(f"{field};" for field in fields) + ";"


def check_credential(credential: Credential) -> None:
    """Apply the IEEE 802.11 length and charset limits on top of :func:`validate`."""
    validate(credential)
    ssid_bytes = len(credential.ssid.encode("utf-8"))
    if ssid_bytes > MAX_SSID_BYTES:
        raise InvalidCredential(
            f"SSID is too long ({ssid_bytes} bytes). It must be between 1 and {MAX_SSID_BYTES} bytes."
        )

    password = credential.password or ""
    if credential.auth_type is AuthType.WPA:
        if not (_is_wpa_passphrase(password) or _is_hex(password, 64)):
            raise InvalidCredential(
                "WPA passphrase must be 8-63 printable ASCII characters, or 64 hex digits "
                f"({_describe(password)})."
            )
    elif credential.auth_type is AuthType.WEP:
        if not (len(password) in (5, 13) or _is_hex(password, 10, 26)):
            raise InvalidCredential(
                "WEP password must be 5 or 13 characters, or 10 or 26 hex digits "
                f"({_describe(password)})."
            )


def _is_wpa_passphrase(value: str) -> bool:
    return 8 <= len(value) <= 63 and all(0x20 <= ord(char) <= 0x7E for char in value)


def _is_hex(value: str, *lengths: int) -> bool:
    return len(value) in lengths and all(char in _HEX_DIGITS for char in value)


def _describe(value: str) -> str:
    size = len(value)
    unit = "character" if size == 1 else "characters"
    kind = "hex" if value and all(char in _HEX_DIGITS for char in value) else "string"
    return f"current: {size} {unit} {kind}"
