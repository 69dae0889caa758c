"""Cached, adapter-aware schema introspection."""

import logging
import re
import uuid
from typing import Dict, List, Optional

from .adapters import AdapterRegistry, adapter_registry
from .base import Capability, SchemaDriver
from .models import (
    ColumnDescriptor,
    ForeignKeyDescriptor,
    PrimaryKey,
    qualified,
    unqualified,
)
from .sqlalchemy_driver import SQLAlchemyDriver
from ..naming import table_key

logger = logging.getLogger(__name__)


class SchemaInspector:
    """Issues the introspection calls for one connection and caches the results.

    Each lookup uses the override registered for the connection's adapter if
    there is one, and the native driver otherwise. Foreign keys get a third
    option: when neither an override nor the native lookup is available, they
    are inferred from column and table names.
    """

    # Columns that look like references to another table: author_id, authorId
    ID_PATTERN = re.compile(r'(?:_id|Id)$')

    # Key names a target table must use for an inferred foreign key to count
    ID_KEY_NAMES = ('id', 'Id', 'ID')

    def __init__(
        self,
        connection,
        adapter: Optional[str] = None,
        adapters: Optional[AdapterRegistry] = None,
        driver: Optional[SchemaDriver] = None,
        subschema: Optional[str] = None,
    ):
        """Initialize the inspector.

        Args:
            connection: Live connection (SQLAlchemy Engine or Connection)
            adapter: Adapter id; defaults to the connection's dialect name
            adapters: Registry of adapter overrides (default: process-wide registry)
            driver: Native driver; defaults to SQLAlchemy reflection
            subschema: Schema whose tables are listed by the native driver
        """
        self.connection = connection
        self.adapter = adapter or connection.dialect.name
        self.subschema = subschema or None
        self.driver = driver or SQLAlchemyDriver(connection)

        registry = adapters if adapters is not None else adapter_registry
        self.registration = registry.lookup(self.adapter)

        self._tables: Optional[List[str]] = None
        self._columns: Dict[str, List[ColumnDescriptor]] = {}
        self._primary_keys: Dict[str, PrimaryKey] = {}
        self._foreign_keys: Dict[str, List[ForeignKeyDescriptor]] = {}

    def tables(self) -> List[str]:
        """Return the names of the tables in the target database."""
        if self._tables is None:
            if self.registration.has(Capability.TABLES):
                tables = self.registration.tables(self.connection)
            else:
                tables = self.driver.get_tables(schema=self.subschema)
            self._tables = list(tables)
            logger.debug("Found %d tables via %s", len(self._tables), self.adapter)
        return self._tables

    def columns(self, table_name: str) -> List[ColumnDescriptor]:
        """Return the columns of a table, in ordinal order."""
        table_name = str(table_name)
        if table_name not in self._columns:
            if self.registration.has(Capability.COLUMNS):
                columns = self.registration.columns(self.connection, table_name)
            else:
                columns = self.driver.get_columns(table_name)
            self._columns[table_name] = list(columns)
        return self._columns[table_name]

    def primary_key(self, table_name: str) -> PrimaryKey:
        """Return the primary key of a table: None, a name, or a tuple of names."""
        table_name = str(table_name)
        if table_name not in self._primary_keys:
            if self.registration.has(Capability.PRIMARY_KEY):
                primary_key = self.registration.primary_key(self.connection, table_name)
            else:
                primary_key = self.driver.get_primary_key(table_name)
            if isinstance(primary_key, list):
                primary_key = tuple(primary_key)
            self._primary_keys[table_name] = primary_key
        return self._primary_keys[table_name]

    def foreign_keys(self, table_name: str) -> List[ForeignKeyDescriptor]:
        """Return the foreign keys of a table.

        Uses the adapter override if registered, else the native driver. If
        the driver does not support foreign key lookups, a best-effort guess
        is made from table and column names (see infer_foreign_keys).
        """
        table_name = str(table_name)
        if table_name not in self._foreign_keys:
            if self.registration.has(Capability.FOREIGN_KEYS):
                foreign_keys = self.registration.foreign_keys(self.connection, table_name)
            elif self.driver.supports(Capability.FOREIGN_KEYS):
                foreign_keys = self.driver.get_foreign_keys(table_name)
            else:
                foreign_keys = self.infer_foreign_keys(table_name)
            self._foreign_keys[table_name] = list(foreign_keys)
        return self._foreign_keys[table_name]

    def infer_foreign_keys(self, table_name: str) -> List[ForeignKeyDescriptor]:
        """Guess foreign keys from column names.

        A column like "author_id" or "authorId" is taken to reference the
        table "author" (or "authors", "Authors", ...) when that table exists
        and its primary key is "id"/"Id"/"ID" or has the column's own name.
        Under-detection is expected; the key-name check keeps false positives
        down without ruling them out.
        """
        foreign_keys = []

        for column in self.columns(table_name):
            if not self.ID_PATTERN.search(column.name):
                continue

            target_table = self._match_table(self.ID_PATTERN.sub('', column.name))
            if target_table is None:
                continue

            target_column = self.primary_key(qualified(target_table, context=table_name))
            if target_column not in self.ID_KEY_NAMES + (column.name,):
                continue

            foreign_keys.append(ForeignKeyDescriptor(
                from_table=unqualified(table_name),
                to_table=target_table,
                column=column.name,
                primary_key=target_column,
                name=f"FK_{uuid.uuid4().hex}",
                synthesized=True,
            ))

        if foreign_keys:
            logger.debug(
                "Inferred %d foreign keys for %s: %s",
                len(foreign_keys), table_name,
                ", ".join(f"{fk.column} -> {fk.to_table}" for fk in foreign_keys),
            )
        return foreign_keys

    def _match_table(self, candidate: str) -> Optional[str]:
        """Find the table a column-derived name refers to."""
        if not candidate:
            return None

        tables = self.tables()
        if candidate in tables:
            return candidate

        key = table_key(candidate)
        for table in tables:
            if table_key(table) == key:
                return table
        return None
