"""Tests for the CLI module."""

import json
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest
from fixtures import (
    DEST_REPLY,
    HELLO_NOVERSION,
    HELLO_OK,
    NAMING_NOT_FOUND,
    NAMING_OK,
    SAMPLE_KEYS,
    SAMPLE_PRIV,
    SESSION_OK,
    FakeSocket,
)

from i2psam import __version__, output
from i2psam.cli import main
from i2psam.cli_helpers import get_sam_address, get_timeout, load_keys, parse_option, save_keys


def _run(argv: list[str], *socks: FakeSocket) -> tuple[int, str, str]:
    with (
        patch("socket.create_connection", side_effect=list(socks)),
        patch("sys.stdout", new=StringIO()) as fake_out,
        patch("sys.stderr", new=StringIO()) as fake_err,
    ):
        code = main(argv)
    output.configure()
    return code, fake_out.getvalue(), fake_err.getvalue()


def test_version_command() -> None:
    """Test the version command outputs correct version."""
    code, out, _ = _run(["version"])
    assert code == 0
    assert out.strip() == __version__


def test_no_command_prints_help() -> None:
    """Test that running without a command shows help."""
    code, out, _ = _run([])
    assert code == 0
    assert "commands" in out


def test_hello_command() -> None:
    """Test the hello command against a SAMv3 bridge."""
    code, out, _ = _run(["--sam", "127.0.0.1:7656", "hello"], FakeSocket([HELLO_OK]))
    assert code == 0
    assert "speaks SAMv3" in out


def test_malformed_sam_address() -> None:
    """Test that a malformed --sam value is reported instead of raising."""
    code, _, err = _run(["--sam", "localhost", "hello"])
    assert code == 1
    assert err.startswith("Error:")


def test_hello_unsupported() -> None:
    """Test that a bridge without SAMv3 is reported as an error."""
    code, _, err = _run(["hello"], FakeSocket([HELLO_NOVERSION]))
    assert code == 1
    assert "does not support SAMv3" in err


def test_generate_saves_keys(tmp_path: Path) -> None:
    """Test that generate prints the address and saves the keys."""
    key_file = tmp_path / "keys.json"
    code, out, _ = _run(
        ["generate", "--save", str(key_file)], FakeSocket([HELLO_OK, DEST_REPLY])
    )
    assert code == 0
    assert SAMPLE_KEYS.address.base32 in out
    assert SAMPLE_PRIV not in out
    assert load_keys(key_file) == SAMPLE_KEYS


def test_lookup_command() -> None:
    """Test resolving a name."""
    code, out, _ = _run(["lookup", "example.i2p"], FakeSocket([HELLO_OK, NAMING_OK]))
    assert code == 0
    assert SAMPLE_KEYS.address.base32 in out


def test_lookup_not_found() -> None:
    """Test that an unknown name is reported."""
    code, _, err = _run(["lookup", "nonexistent.i2p"], FakeSocket([HELLO_OK, NAMING_NOT_FOUND]))
    assert code == 1
    assert "Unable to resolve nonexistent.i2p" in err


def test_session_with_key_file(tmp_path: Path) -> None:
    """Test creating a session from saved keys."""
    key_file = tmp_path / "keys.json"
    save_keys(SAMPLE_KEYS, key_file)
    control = FakeSocket([HELLO_OK])
    data = FakeSocket([HELLO_OK, SESSION_OK])

    code, out, _ = _run(
        ["session", "s1", "--keys", str(key_file), "-o", "inbound.length=2", "--style", "RAW"],
        control,
        data,
    )

    assert code == 0
    assert "s1 (RAW)" in out
    assert data.lines[1].startswith("SESSION CREATE STYLE=RAW ID=s1 ")
    assert data.lines[1].endswith(" OPTION=inbound.length=2")
    assert control.closed
    assert data.closed


def test_session_generates_keys() -> None:
    """Test that a session without a key file uses fresh keys."""
    control = FakeSocket([HELLO_OK, DEST_REPLY])
    data = FakeSocket([HELLO_OK, SESSION_OK])
    code, _, _ = _run(["session", "s1"], control, data)
    assert code == 0
    assert control.lines[1] == "DEST GENERATE"


def test_session_bad_option() -> None:
    """Test that malformed options are rejected before connecting."""
    code, _, err = _run(["session", "s1", "-o", "nokey"])
    assert code == 1
    assert "KEY=VALUE" in err


def test_session_hold_ends_when_bridge_closes() -> None:
    """Test that --hold returns once the bridge drops the session connection."""
    control = FakeSocket([HELLO_OK, DEST_REPLY])
    data = FakeSocket([HELLO_OK, SESSION_OK])
    code, out, err = _run(["session", "s1", "--hold"], control, data)
    assert code == 1
    assert "s1 (STREAM)" in out
    assert "session closed by the bridge" in err
    assert data.closed


def test_verbose_debug_redacts_keys() -> None:
    """Test that -vv shows raw lines without private keys."""
    control = FakeSocket([HELLO_OK, DEST_REPLY])
    data = FakeSocket([HELLO_OK, SESSION_OK])
    code, _, err = _run(["-vv", "session", "s1"], control, data)
    assert code == 0
    assert "SESSION CREATE" in err
    assert SAMPLE_PRIV not in err


class TestConfig:
    """Tests for environment configuration."""

    def test_timeout_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default timeout."""
        monkeypatch.delenv("I2PSAM_TIMEOUT", raising=False)
        assert get_timeout() == 30.0

    def test_timeout_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading the timeout from the environment."""
        monkeypatch.setenv("I2PSAM_TIMEOUT", "2.5")
        assert get_timeout() == 2.5

    def test_timeout_invalid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an invalid value falls back to the default with a warning."""
        monkeypatch.setenv("I2PSAM_TIMEOUT", "soon")
        with patch("sys.stderr", new=StringIO()) as fake_err:
            assert get_timeout() == 30.0
        assert "I2PSAM_TIMEOUT" in fake_err.getvalue()

    def test_address_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading the bridge address from the environment."""
        monkeypatch.setenv("I2PSAM_ADDRESS", "10.0.0.2:7656")
        assert get_sam_address() == "10.0.0.2:7656"

    def test_address_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default bridge address."""
        monkeypatch.delenv("I2PSAM_ADDRESS", raising=False)
        assert get_sam_address() == "127.0.0.1:7656"


class TestKeyFiles:
    """Tests for key file helpers."""

    def test_saved_file_is_private(self, tmp_path: Path) -> None:
        """Test that key files are readable only by the owner."""
        key_file = tmp_path / "keys.json"
        save_keys(SAMPLE_KEYS, key_file)
        assert key_file.stat().st_mode & 0o077 == 0
        assert json.loads(key_file.read_text())["public"] == SAMPLE_KEYS.address.destination

    def test_load_invalid(self, tmp_path: Path) -> None:
        """Test that a non-JSON file raises ValueError."""
        key_file = tmp_path / "keys.json"
        key_file.write_text("not json")
        with pytest.raises(ValueError):
            load_keys(key_file)

    def test_load_wrong_shape(self, tmp_path: Path) -> None:
        """Test that a JSON list raises ValueError."""
        key_file = tmp_path / "keys.json"
        key_file.write_text("[]")
        with pytest.raises(ValueError):
            load_keys(key_file)


@pytest.mark.parametrize("option", ["nokey", "=value", "a=b c"])
def test_parse_option_invalid(option: str) -> None:
    """Test that malformed options raise ValueError."""
    with pytest.raises(ValueError):
        parse_option(option)
