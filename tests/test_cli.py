import io

import pytest

from qrfi import __main__ as cli
from qrfi import __version__
from qrfi.errors import IOFailure


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("QRFI_FORMAT", "QRFI_ERROR_CORRECTION", "QRFI_BORDER", "QRFI_SCALE", "QRFI_SVG_MIN_SIZE", "QRFI_STRICT", "QRFI_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))


def test_ascii_output_end_to_end(capsys):
    assert cli.main(["MyNet", "-p", "pass1234"]) == 0
    out, err = capsys.readouterr()
    lines = out.rstrip("\n").split("\n")
    assert len(lines) > 1
    assert "█" in out
    assert err == ""


def test_png_output(capsysbinary):
    assert cli.main(["MyNet", "-p", "pass1234", "-f", "png"]) == 0
    out, _ = capsysbinary.readouterr()
    assert out.startswith(b"\x89PNG")


def test_svg_output(capsys):
    assert cli.main(["--password=pass1234", "--format", "svg", "--", "Café ☕"]) == 0
    out, _ = capsys.readouterr()
    assert "<svg" in out


def test_ssid_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("MyNet\r\nignored\n"))
    assert cli.main(["-p", "pass1234"]) == 0
    assert "█" in capsys.readouterr().out


def test_resolve_credential_reads_first_stdin_line():
    args = cli.build_parser(cli.load_settings()).parse_args(["-t", "nopass", "-p", "secret"])
    credential = cli.resolve_credential(args, io.StringIO("Guest\nother\n"))
    assert credential.ssid == "Guest"
    assert credential.password is None


@pytest.fixture
def encoded_payloads(monkeypatch):
    payloads = []
    real_encode = cli.encoder.encode

    def spy(payload, **kwargs):
        payloads.append(payload)
        return real_encode(payload, **kwargs)

    monkeypatch.setattr(cli.encoder, "encode", spy)
    return payloads


def test_end_to_end_payload(encoded_payloads, capsys):
    assert cli.main(["MyNet", "-p", "pass1234"]) == 0
    assert encoded_payloads == ["WIFI:T:WPA;S:MyNet;P:pass1234;;"]


def test_nopass_ignores_password(encoded_payloads, capsys):
    assert cli.main(["-t", "nopass", "--password=whatever", "--", "Lobby"]) == 0
    assert "█" in capsys.readouterr().out
    assert encoded_payloads == ["WIFI:T:;S:Lobby;;"]


def test_hidden_flag(encoded_payloads, capsys):
    assert cli.main(["Hidden", "-p", "pass1234", "-H"]) == 0
    assert encoded_payloads == ["WIFI:T:WPA;S:Hidden;P:pass1234;H:true;;"]


def test_stdin_that_is_not_utf8_fails(monkeypatch, capsys):
    stdin = io.TextIOWrapper(io.BytesIO(b"caf\xe9\n"), encoding="utf-8")
    monkeypatch.setattr("sys.stdin", stdin)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-p", "pass1234"])
    assert excinfo.value.code == 1
    assert "not valid UTF-8" in capsys.readouterr().err


@pytest.mark.parametrize("extra", [[], ["--strict"]])
def test_undecodable_argv_ssid_fails(extra, capsys):
    ssid = b"caf\xe9".decode("utf-8", "surrogateescape")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([ssid, "-p", "pass1234", *extra])
    assert excinfo.value.code == 1
    assert "SSID is not valid UTF-8" in capsys.readouterr().err


def test_empty_ssid_fails(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-p", "pass1234"])
    assert excinfo.value.code == 1
    _, err = capsys.readouterr()
    assert "qrfi: error: SSID cannot be empty" in err


def test_missing_password_fails(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["MyNet"])
    assert excinfo.value.code == 1
    assert "password is required" in capsys.readouterr().err


def test_strict_mode_rejects_long_ssid(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["x" * 33, "-p", "pass1234", "--strict"])
    assert excinfo.value.code == 1
    assert "SSID is too long" in capsys.readouterr().err


def test_strict_mode_off_by_default(capsys):
    assert cli.main(["x" * 33, "-p", "short"]) == 0


def test_strict_from_environment_can_be_disabled(monkeypatch, capsys):
    monkeypatch.setenv("QRFI_STRICT", "1")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["MyNet", "-p", "short"])
    assert excinfo.value.code == 1
    assert "WPA passphrase" in capsys.readouterr().err
    assert cli.main(["MyNet", "-p", "short", "--no-strict"]) == 0


def test_oversized_payload_fails(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-t", "nopass", "-e", "H", "--", "x" * 3000])
    assert excinfo.value.code == 1
    assert "does not fit" in capsys.readouterr().err


@pytest.mark.parametrize("fmt", ["jpeg", "jpg"])
def test_unsupported_format_rejected(fmt, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["MyNet", "-p", "pass1234", "-f", fmt])
    assert excinfo.value.code == 2
    assert f"invalid choice: '{fmt}'" in capsys.readouterr().err


def test_negative_scale_reported(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["MyNet", "-p", "pass1234", "-f", "png", "--scale", "0"])
    assert excinfo.value.code == 1
    assert "scale" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert f"qrfi {__version__}" in capsys.readouterr().out


def test_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--help"])
    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "A CLI Wi-Fi QR Code Generator" in out
    assert "echo SSID | qrfi -p PASSWORD" in out


def test_format_default_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("QRFI_FORMAT", "svg")
    assert cli.main(["MyNet", "-p", "pass1234"]) == 0
    assert "<svg" in capsys.readouterr().out


def test_verbose_logging_never_leaks_password(capsys):
    assert cli.main(["MyNet", "-p", "hunter2secret", "-vv"]) == 0
    err = capsys.readouterr().err
    assert "payload_built" in err
    assert "auth_type=WPA" in err
    assert "Encoded QR version" in err
    assert "hunter2secret" not in err
    assert "WIFI:" not in err


def test_default_log_level_is_quiet(capsys):
    assert cli.main(["MyNet", "-p", "pass1234"]) == 0
    assert capsys.readouterr().err == ""


class _BrokenStream(io.StringIO):
    def write(self, text):
        raise BrokenPipeError(32, "Broken pipe")


def test_write_output_wraps_broken_pipe():
    with pytest.raises(IOFailure, match="failed to write output"):
        cli.write_output("qr", _BrokenStream())


def test_write_output_binary():
    raw = io.BytesIO()
    stream = io.TextIOWrapper(raw, encoding="utf-8")
    cli.write_output(b"\x89PNG", stream)
    assert raw.getvalue() == b"\x89PNG"
