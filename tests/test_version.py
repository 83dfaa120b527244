"""Tests for version lookup."""
from importlib import metadata

from arenalog.core import version


class TestGetVersion:
    def test_reads_installed_metadata(self, monkeypatch):
        monkeypatch.setattr(version.metadata, "version", lambda name: "9.9.9" if name == "mtga-arenalog" else "")
        assert version.get_version() == "9.9.9"

    def test_falls_back_when_not_installed(self, monkeypatch):
        def missing(name):
            raise metadata.PackageNotFoundError(name)

        monkeypatch.setattr(version.metadata, "version", missing)
        assert version.get_version() == version.FALLBACK_VERSION

