"""Abstract base class for native schema drivers."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, List

from .models import ColumnDescriptor, ForeignKeyDescriptor, PrimaryKey


class Capability(str, Enum):
    """Introspection lookups a driver or adapter override may provide."""
    TABLES = "tables"
    COLUMNS = "columns"
    PRIMARY_KEY = "primary_key"
    FOREIGN_KEYS = "foreign_keys"


class SchemaDriver(ABC):
    """Abstract base class for native schema introspection.

    Subclasses implement the lookups against a live connection. Lookups a
    database cannot answer are reported through supports() rather than by
    raising, so callers can branch to a fallback.

    Table names passed to the per-table lookups may be qualified with a
    schema ("dbo.Books").
    """

    def supports(self, capability: Capability) -> bool:
        """Whether the native lookup for a capability is available.

        Args:
            capability: The lookup being checked

        Returns:
            True unless the driver knows the lookup is unsupported
        """
        return True

    @abstractmethod
    def get_tables(self, schema: Optional[str] = None) -> List[str]:
        """Get all table names.

        Args:
            schema: Optional schema to list (default schema if omitted)

        Returns:
            List of unqualified table names
        """
        pass

    @abstractmethod
    def get_columns(self, table_name: str) -> List[ColumnDescriptor]:
        """Get all columns for a table, in ordinal order.

        Args:
            table_name: Table name, optionally schema-qualified

        Returns:
            List of ColumnDescriptor objects
        """
        pass

    @abstractmethod
    def get_primary_key(self, table_name: str) -> PrimaryKey:
        """Get the primary key for a table.

        Args:
            table_name: Table name, optionally schema-qualified

        Returns:
            None, a single column name, or a tuple of names for composite keys
        """
        pass

    @abstractmethod
    def get_foreign_keys(self, table_name: str) -> List[ForeignKeyDescriptor]:
        """Get foreign keys declared on a table.

        Args:
            table_name: Table name, optionally schema-qualified

        Returns:
            List of ForeignKeyDescriptor objects where the table is the source
        """
        pass

    def close(self):
        """Release any resources held by the driver."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def split_table_name(table_name: str):
    """Split "schema.table" into (schema, table); schema is None if unqualified."""
    schema, _, table = table_name.rpartition('.')
    return (schema or None), table


def primary_key_from_columns(columns: List[str]) -> PrimaryKey:
    """Collapse a list of key columns into None, a name, or a tuple."""
    if not columns:
        return None
    if len(columns) == 1:
        return columns[0]
    return tuple(columns)
