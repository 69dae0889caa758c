"""Shared pytest fixtures for automodel tests."""

import pytest
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
)

from automodel.database.adapters import AdapterRegistry
from automodel.database.base import Capability
from automodel.database.models import ColumnDescriptor, ForeignKeyDescriptor
from automodel.namespace import NamespaceRegistry

from .fixtures import FakeDriver, FakeTable


def _create(url: str, metadata: MetaData) -> str:
    engine = create_engine(url)
    metadata.create_all(engine)
    engine.dispose()
    return url


@pytest.fixture
def library_db(tmp_path):
    """SQLite library database with declared foreign keys.

    Authors, Publishers, and Books use spaced column names ("Author ID");
    Editions has a composite primary key.
    """
    metadata = MetaData()
    Table(
        "Authors", metadata,
        Column("Author ID", Integer, primary_key=True),
        Column("Name", String(100), nullable=False),
        Column("Birthday", Date),
        Column("Address", String(200)),
    )
    Table(
        "Publishers", metadata,
        Column("Publisher ID", Integer, primary_key=True),
        Column("Name", String(100), nullable=False),
        Column("Address", String(200)),
        Column("Website", String(200)),
        Column("IsActive", Boolean),
    )
    Table(
        "Books", metadata,
        Column("Book ID", Integer, primary_key=True),
        Column("Title", String(200), nullable=False),
        Column("Author ID", Integer, ForeignKey("Authors.Author ID")),
        Column("Publisher ID", Integer, ForeignKey("Publishers.Publisher ID")),
    )
    Table(
        "Editions", metadata,
        Column("Book ID", Integer, ForeignKey("Books.Book ID"), primary_key=True),
        Column("Edition", Integer, primary_key=True),
        Column("Published", Date),
    )
    return _create(f"sqlite:///{tmp_path / 'library.db'}", metadata)


@pytest.fixture
def undeclared_fk_db(tmp_path):
    """SQLite database whose references exist only as *_id column names."""
    metadata = MetaData()
    Table(
        "Authors", metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String(100)),
    )
    Table(
        "Books", metadata,
        Column("id", Integer, primary_key=True),
        Column("title", String(200)),
        Column("author_id", Integer),
        Column("isbn_id", String(20)),
    )
    return _create(f"sqlite:///{tmp_path / 'undeclared.db'}", metadata)


@pytest.fixture
def registry():
    """Create a fresh NamespaceRegistry for each test."""
    return NamespaceRegistry()


@pytest.fixture
def adapters():
    """Create an empty AdapterRegistry for each test."""
    return AdapterRegistry()


@pytest.fixture
def fake_tables():
    """Canned metadata for Authors and Books with one declared foreign key."""
    return {
        "Authors": FakeTable(
            columns=[
                ColumnDescriptor(name="id", type="integer", nullable=False),
                ColumnDescriptor(name="FullName", type="string"),
            ],
            primary_key="id",
        ),
        "Books": FakeTable(
            columns=[
                ColumnDescriptor(name="id", type="integer", nullable=False),
                ColumnDescriptor(name="Title", type="string"),
                ColumnDescriptor(name="author_id", type="integer"),
                ColumnDescriptor(name="is_is_published", type="boolean"),
            ],
            primary_key="id",
            foreign_keys=[
                ForeignKeyDescriptor(
                    from_table="Books", to_table="Authors",
                    column="author_id", primary_key="id", name="FK_books_authors",
                ),
            ],
        ),
    }


@pytest.fixture
def fake_driver(fake_tables):
    """FakeDriver with native foreign key support."""
    return FakeDriver(fake_tables)


@pytest.fixture
def fake_driver_without_fks(fake_tables):
    """FakeDriver that reports foreign key lookups as unsupported."""
    return FakeDriver(fake_tables, unsupported={Capability.FOREIGN_KEYS})


@pytest.fixture
def disconnect():
    """Collect generated base classes and disconnect them after the test."""
    bases = []
    yield bases.append
    for base in bases:
        base.disconnect()
