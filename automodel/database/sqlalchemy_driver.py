"""Native schema driver built on SQLAlchemy reflection."""

import logging
from typing import Iterable, Optional, List

from sqlalchemy import inspect
from sqlalchemy.engine.interfaces import Dialect

from .base import (
    Capability,
    SchemaDriver,
    primary_key_from_columns,
    split_table_name,
)
from .models import ColumnDescriptor, ForeignKeyDescriptor, PrimaryKey, unqualified
from .type_mappers import SQLAlchemyTypeMapper

logger = logging.getLogger(__name__)

# Dialect reflection method backing each capability
REFLECTION_METHODS = {
    Capability.TABLES: "get_table_names",
    Capability.COLUMNS: "get_columns",
    Capability.PRIMARY_KEY: "get_pk_constraint",
    Capability.FOREIGN_KEYS: "get_foreign_keys",
}


class SQLAlchemyDriver(SchemaDriver):
    """Introspects any database SQLAlchemy has a dialect for."""

    def __init__(self, connection, unsupported: Optional[Iterable[Capability]] = None):
        """Initialize the driver.

        Args:
            connection: SQLAlchemy Engine or Connection to inspect
            unsupported: Capabilities to report as unsupported regardless of
                         what the dialect implements
        """
        self.connection = connection
        self.unsupported = {Capability(c) for c in (unsupported or ())}
        self._inspector = None
        self._type_mapper = SQLAlchemyTypeMapper()

    @property
    def inspector(self):
        if self._inspector is None:
            self._inspector = inspect(self.connection)
        return self._inspector

    @property
    def dialect(self):
        return self.connection.dialect

    def supports(self, capability: Capability) -> bool:
        """A capability is supported when the dialect implements its reflection method."""
        capability = Capability(capability)
        if capability in self.unsupported:
            return False

        method = REFLECTION_METHODS[capability]
        return getattr(type(self.dialect), method, None) is not getattr(Dialect, method, None)

    def get_tables(self, schema: Optional[str] = None) -> List[str]:
        """Get all table names in a schema (views excluded)."""
        return list(self.inspector.get_table_names(schema=schema))

    def get_columns(self, table_name: str) -> List[ColumnDescriptor]:
        """Get all columns for a table."""
        schema, table = split_table_name(table_name)

        columns = []
        for col in self.inspector.get_columns(table, schema=schema):
            columns.append(ColumnDescriptor(
                name=col["name"],
                type=self._type_mapper.to_semantic_type(col["type"]),
                nullable=col.get("nullable", True),
                default=col.get("default"),
                sql_type=col["type"],
            ))
        return columns

    def get_primary_key(self, table_name: str) -> PrimaryKey:
        """Get the primary key for a table."""
        schema, table = split_table_name(table_name)
        constraint = self.inspector.get_pk_constraint(table, schema=schema) or {}
        return primary_key_from_columns(constraint.get("constrained_columns") or [])

    def get_foreign_keys(self, table_name: str) -> List[ForeignKeyDescriptor]:
        """Get single-column foreign keys declared on a table."""
        schema, table = split_table_name(table_name)

        foreign_keys = []
        for fk in self.inspector.get_foreign_keys(table, schema=schema):
            constrained = fk.get("constrained_columns") or []
            referred = fk.get("referred_columns") or []
            if len(constrained) != 1 or len(referred) != 1:
                logger.debug(
                    "Skipping multi-column foreign key %s on %s",
                    fk.get("name"), table_name,
                )
                continue

            foreign_keys.append(ForeignKeyDescriptor(
                from_table=unqualified(table_name),
                to_table=fk["referred_table"],
                column=constrained[0],
                primary_key=referred[0],
                name=fk.get("name"),
            ))
        return foreign_keys

    def close(self):
        self._inspector = None
