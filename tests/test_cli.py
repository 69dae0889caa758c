"""Tests for the automodel CLI."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from automodel import main
from automodel.config import settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render tables wide enough that cells are not wrapped."""
    monkeypatch.setattr(main, "console", Console(width=200))


class TestTablesCommand:
    """Test the tables command."""

    def test_lists_tables(self, library_db):
        """Test tables are listed with model names and keys."""
        result = runner.invoke(main.app, ["tables", library_db])

        assert result.exit_code == 0, result.output
        for name in ("Authors", "Publishers", "Books", "Editions"):
            assert name in result.output
        assert "Book ID, Edition" in result.output
        assert "Author ID -> Authors.Author ID" in result.output
        assert "(inferred)" not in result.output

    def test_default_spec_from_settings(self, library_db, monkeypatch):
        """Test the spec falls back to AUTOMODEL_DATABASE_URL."""
        monkeypatch.setattr(settings, "database_url", library_db)
        result = runner.invoke(main.app, ["tables"])

        assert result.exit_code == 0, result.output
        assert "Authors" in result.output

    def test_missing_spec(self, monkeypatch):
        """Test a missing spec exits with an error."""
        monkeypatch.setattr(settings, "database_url", None)
        result = runner.invoke(main.app, ["tables"])

        assert result.exit_code == 1
        assert "AUTOMODEL_DATABASE_URL" in result.output

    def test_invalid_spec(self):
        """Test an unparseable spec exits with an error."""
        result = runner.invoke(main.app, ["tables", "not a url"])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestModelsCommand:
    """Test the models command."""

    def test_lists_models(self, library_db):
        """Test generated models are shown with aliases and associations."""
        result = runner.invoke(main.app, ["models", library_db, "--namespace", "Library"])

        assert result.exit_code == 0, result.output
        assert "Models in Library" in result.output
        for name in ("Author", "Publisher", "Book", "Edition"):
            assert name in result.output
        assert "author_id -> Author ID" in result.output
        assert "Authors -> Author" in result.output

    def test_short_namespace_flag(self, library_db):
        """Test -n sets the namespace like --namespace."""
        result = runner.invoke(main.app, ["models", library_db, "-n", "WeirdDB::Models"])

        assert result.exit_code == 0, result.output
        assert "Models in WeirdDB::Models" in result.output

    def test_verbose(self, library_db):
        """Test --verbose still produces the listing."""
        result = runner.invoke(main.app, ["--verbose", "models", library_db])

        assert result.exit_code == 0, result.output
        assert "Book" in result.output


class TestConfigCommand:
    """Test the config command."""

    def test_shows_settings(self):
        """Test current settings are printed."""
        result = runner.invoke(main.app, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
        assert settings.connectors_namespace in result.output
