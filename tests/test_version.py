"""Tests for version information."""

import pytest

from scholia.cli import main


def test_version_flag(capsys):
    """Test that --version prints the version and exits cleanly."""
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "scholia" in out
    assert "python" in out
    assert "platform" in out


def test_version_module():
    """Test that version is accessible from module."""
    from scholia import __version__

    assert __version__
    assert isinstance(__version__, str)
    parts = __version__.split('.')
    assert len(parts) >= 2
