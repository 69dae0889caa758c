"""Tests for table mapping."""

import pytest
from sqlalchemy import create_engine

from automodel.database.mapper import map_tables, normalize_subschema


class TestNormalizeSubschema:
    """Test subschema prefixes."""

    @pytest.mark.parametrize("subschema, expected", [
        ("dbo", "dbo."),
        ("dbo.", "dbo."),
        ("dbo..", "dbo."),
        (".dbo", "dbo."),
        ("", ""),
        (None, ""),
    ])
    def test_prefix(self, subschema, expected):
        """Test a subschema always yields a single trailing dot, or nothing."""
        assert normalize_subschema(subschema) == expected


class TestMapTables:
    """Test TableDescriptor construction."""

    def test_one_descriptor_per_table(self, fake_driver):
        """Test each table is described once with its metadata."""
        tables = {t.name: t for t in map_tables(None, adapter="fake", driver=fake_driver)}

        assert set(tables) == {"Authors", "Books"}
        books = tables["Books"]
        assert books.base_name == "Books"
        assert books.model_name == "Book"
        assert books.primary_key == "id"
        assert [fk.column for fk in books.foreign_keys] == ["author_id"]
        assert [c.name for c in books.columns] == ["id", "Title", "author_id", "is_is_published"]

    def test_aliases_start_with_raw_names(self, fake_driver):
        """Test raw column names are registered as their own aliases."""
        books = map_tables(None, adapter="fake", driver=fake_driver)[1]

        assert set(books.column_aliases) == {"id", "Title", "author_id", "is_is_published"}
        assert all(books.column_aliases[name].name == name for name in books.column_aliases)

    def test_subschema_prefixes_names(self, fake_driver):
        """Test a subschema qualifies names but not base or model names."""
        tables = map_tables(None, subschema="dbo", adapter="fake", driver=fake_driver)

        assert [t.name for t in tables] == ["dbo.Authors", "dbo.Books"]
        assert [t.base_name for t in tables] == ["Authors", "Books"]
        assert [t.model_name for t in tables] == ["Author", "Book"]
        assert [t.schema for t in tables] == ["dbo", "dbo"]
        assert fake_driver.schemas_requested == ["dbo"]
        assert "dbo.Books" in fake_driver.requested

    def test_composite_primary_key(self, library_db):
        """Test composite keys are flagged on the descriptor."""
        engine = create_engine(library_db)
        try:
            tables = {t.name: t for t in map_tables(engine)}
        finally:
            engine.dispose()

        assert tables["Editions"].composite_primary_key is True
        assert tables["Editions"].primary_key_columns == ["Book ID", "Edition"]
        assert tables["Authors"].composite_primary_key is False
        assert tables["Authors"].primary_key_columns == ["Author ID"]

    def test_no_model_before_definition(self, fake_driver):
        """Test descriptors carry no model until one is defined."""
        assert all(t.model is None for t in map_tables(None, adapter="fake", driver=fake_driver))
