"""In-memory schema driver for testing without a database."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from automodel.database.base import Capability, SchemaDriver, split_table_name
from automodel.database.models import ColumnDescriptor, ForeignKeyDescriptor, PrimaryKey


@dataclass
class FakeTable:
    """Canned answers for one table."""
    columns: List[ColumnDescriptor] = field(default_factory=list)
    primary_key: PrimaryKey = None
    foreign_keys: List[ForeignKeyDescriptor] = field(default_factory=list)


class FakeDriver(SchemaDriver):
    """SchemaDriver serving canned metadata and counting calls.

    Tables are keyed by unqualified name; qualified names passed to the
    per-table lookups are stripped of their schema. The schema passed to
    get_tables() is recorded in schemas_requested.
    """

    def __init__(self, tables: Dict[str, FakeTable], unsupported: Optional[Iterable[Capability]] = None):
        self.tables = tables
        self.unsupported = set(unsupported or ())
        self.calls: Counter = Counter()
        self.requested: List[str] = []
        self.schemas_requested: List[Optional[str]] = []

    def supports(self, capability: Capability) -> bool:
        return capability not in self.unsupported

    def _table(self, table_name: str) -> FakeTable:
        self.requested.append(table_name)
        _, table = split_table_name(table_name)
        return self.tables[table]

    def get_tables(self, schema: Optional[str] = None) -> List[str]:
        self.calls["get_tables"] += 1
        self.schemas_requested.append(schema)
        return list(self.tables)

    def get_columns(self, table_name: str) -> List[ColumnDescriptor]:
        self.calls["get_columns"] += 1
        return list(self._table(table_name).columns)

    def get_primary_key(self, table_name: str) -> PrimaryKey:
        self.calls["get_primary_key"] += 1
        return self._table(table_name).primary_key

    def get_foreign_keys(self, table_name: str) -> List[ForeignKeyDescriptor]:
        if Capability.FOREIGN_KEYS in self.unsupported:
            raise AssertionError("get_foreign_keys called on a driver that does not support it")
        self.calls["get_foreign_keys"] += 1
        return list(self._table(table_name).foreign_keys)
