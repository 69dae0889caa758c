"""Descriptor models produced by schema introspection."""

from typing import Optional, List, Dict, Any, Tuple, Union
from dataclasses import dataclass, field

PrimaryKey = Union[None, str, Tuple[str, ...]]


@dataclass
class ColumnDescriptor:
    """Represents a database column."""
    name: str
    type: str = 'unknown'  # semantic type: 'string', 'integer', 'boolean', ...
    nullable: bool = True
    default: Optional[Any] = None
    sql_type: Optional[Any] = field(default=None, repr=False)  # SQLAlchemy TypeEngine, when reflected


@dataclass
class ForeignKeyDescriptor:
    """Represents a many-to-one link from one table's column to another table's key."""
    from_table: str
    to_table: str
    column: str
    primary_key: str
    name: Optional[str] = None
    synthesized: bool = False  # True when inferred from column names

    @property
    def from_base_name(self) -> str:
        return unqualified(self.from_table.replace('"', ''))

    @property
    def to_base_name(self) -> str:
        return unqualified(self.to_table.replace('"', ''))


@dataclass
class TableDescriptor:
    """Represents a mapped table and, once defined, its generated model."""
    name: str
    base_name: str
    model_name: str
    columns: List[ColumnDescriptor] = field(default_factory=list)
    primary_key: PrimaryKey = None
    foreign_keys: List[ForeignKeyDescriptor] = field(default_factory=list)
    column_aliases: Dict[str, ColumnDescriptor] = field(default_factory=dict)
    model: Optional[type] = field(default=None, repr=False)

    @property
    def composite_primary_key(self) -> bool:
        return isinstance(self.primary_key, (list, tuple))

    @property
    def primary_key_columns(self) -> List[str]:
        """Primary key as a list of column names (empty when there is none)."""
        if self.primary_key is None:
            return []
        if self.composite_primary_key:
            return list(self.primary_key)
        return [self.primary_key]

    @property
    def schema(self) -> Optional[str]:
        """Qualifier of the table name, without the trailing dot."""
        prefix, _, _ = self.name.rpartition('.')
        return prefix or None

    def get_column(self, name: str) -> Optional[ColumnDescriptor]:
        """Find a column by its raw name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None


def qualified(table_name: str, context: str) -> str:
    """Qualify a table name with the namespace of another (context) table.

    Names that are already qualified, or whose context has no qualifier,
    are returned unchanged.
    """
    if '.' in table_name:
        return table_name
    if '.' not in context:
        return table_name
    prefix, _, _ = context.rpartition('.')
    return f"{prefix}.{table_name}"


def unqualified(table_name: str) -> str:
    """Strip any namespace qualifier from a table name."""
    return table_name.split('.')[-1]
