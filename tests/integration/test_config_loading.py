"""Integration tests for loading layered configuration.

These tests verify the end-to-end workflow: sources configured in the
settings file, per-name overrides between directories, and the parsed
output of the CLI.
"""

import json
from pathlib import Path

import pytest
import tomli_w
from tmpfiles.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def layered_sources(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Create a vendor and an admin directory with an overridden file."""
    monkeypatch.chdir(tmp_path)
    vendor = Path("usr-lib")
    admin = Path("etc")
    vendor.mkdir()
    admin.mkdir()

    (vendor / "10-base.conf").write_bytes(
        b"d /run/base 0755 root root -\n"
        b"x /tmp/keep-*\n"
    )
    (vendor / "20-app.conf").write_bytes(b"d /var/lib/app 0700 app app 30d\n")
    # Admin copy replaces the vendor file of the same name
    (admin / "20-app.conf").write_bytes(b"d /var/lib/app 0750 app app 7d\n")
    (admin / "30-local.conf").write_bytes(
        b'w /proc/sys/kernel/example - - - - 1\n'
        b"f~ /etc/banner 0644 - - - aGkK\n"
    )
    return vendor, admin


@pytest.fixture
def settings_file(isolated_settings: Path, layered_sources: tuple[Path, Path]) -> Path:
    """Write settings pointing at the layered sources."""
    vendor, admin = layered_sources
    isolated_settings.parent.mkdir(parents=True)
    isolated_settings.write_bytes(
        tomli_w.dumps(
            {
                "config_sources": [str(vendor), str(admin)],
                "output_format": "json",
            }
        ).encode()
    )
    return isolated_settings


class TestLayeredConfiguration:
    """End-to-end tests for layered configuration sources."""

    def test_parse_uses_configured_sources(self, settings_file: Path) -> None:
        """Lines come from every source in basename order."""
        result = runner.invoke(app, ["parse"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [entry["path"] for entry in data] == [
            "/run/base",
            "/tmp/keep-*",
            "/var/lib/app",
            "/proc/sys/kernel/example",
            "/etc/banner",
        ]

    def test_override_wins(
        self, settings_file: Path, layered_sources: tuple[Path, Path]
    ) -> None:
        """The admin file replaces the vendor file with the same name."""
        _, admin = layered_sources

        result = runner.invoke(app, ["parse"])

        app_line = json.loads(result.stdout)[2]
        assert app_line["file"] == str(admin / "20-app.conf")
        assert app_line["mode"]["value"] == "0750"
        assert app_line["age"] == "aAbBcmM:1w"

    def test_argument_decoding(self, settings_file: Path) -> None:
        """Literal and base64 arguments are reported decoded."""
        result = runner.invoke(app, ["parse"])

        data = json.loads(result.stdout)
        assert data[3]["argument"] == "1"
        assert data[4]["argument"] == "hi\n"

    def test_cat_config_matches_parse_order(
        self, settings_file: Path, layered_sources: tuple[Path, Path]
    ) -> None:
        """cat-config prints the same files parse reads."""
        vendor, admin = layered_sources

        result = runner.invoke(app, ["cat-config"])

        assert result.exit_code == 0
        output = result.stdout_bytes
        assert bytes(vendor / "10-base.conf") in output
        assert bytes(admin / "20-app.conf") in output
        assert bytes(vendor / "20-app.conf") not in output
        assert b"0700" not in output

    def test_check_after_breaking_a_file(
        self, settings_file: Path, layered_sources: tuple[Path, Path]
    ) -> None:
        """A broken admin file makes check fail with its location."""
        _, admin = layered_sources
        (admin / "40-broken.conf").write_bytes(b"d /ok\nd /bad 0755 - - 1x\n")

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1
        assert "40-broken.conf:2:" in result.output
        assert "Unknown duration unit 'x'" in result.output
