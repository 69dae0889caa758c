"""Maps every table of a database into TableDescriptors."""

import logging
import re
from typing import List, Optional

from .adapters import AdapterRegistry
from .base import SchemaDriver
from .inspector import SchemaInspector
from .models import TableDescriptor, unqualified
from .. import naming

logger = logging.getLogger(__name__)


def normalize_subschema(subschema: Optional[str]) -> str:
    """Normalize a subschema into a table-name prefix.

    "dbo" -> "dbo.", "dbo.." -> "dbo.", ".dbo" -> "dbo.", None/"" -> "".
    """
    prefix = re.sub(r'\.+$', '.', f"{subschema or ''}.")
    return re.sub(r'^\.', '', prefix)


def map_tables(
    connection,
    subschema: Optional[str] = None,
    adapter: Optional[str] = None,
    adapters: Optional[AdapterRegistry] = None,
    driver: Optional[SchemaDriver] = None,
) -> List[TableDescriptor]:
    """Scrape the target database and describe each of its tables.

    Args:
        connection: Live connection (SQLAlchemy Engine or Connection)
        subschema: Additional namespace table names are prefixed with
                   (e.g. "dbo" for SQL Server's database.dbo.table)
        adapter: Adapter id; defaults to the connection's dialect name
        adapters: Registry of adapter overrides
        driver: Native schema driver; defaults to SQLAlchemy reflection

    Returns:
        One TableDescriptor per table, in the order the tables were listed.
        Order is not guaranteed to be stable between calls.
    """
    prefix = normalize_subschema(subschema)
    inspector = SchemaInspector(
        connection,
        adapter=adapter,
        adapters=adapters,
        driver=driver,
        subschema=prefix.rstrip('.') or None,
    )

    tables = []
    for table_name in inspector.tables():
        name = f"{prefix}{table_name}"
        base_name = unqualified(name)
        columns = inspector.columns(name)

        table = TableDescriptor(
            name=name,
            base_name=base_name,
            model_name=naming.model_name(base_name),
            columns=columns,
            primary_key=inspector.primary_key(name),
            foreign_keys=inspector.foreign_keys(name),
            # Raw names claim their own slots so aliases never shadow a column
            column_aliases={column.name: column for column in columns},
        )
        logger.debug(
            "Mapped %s -> %s (%d columns, primary key %r, %d foreign keys)",
            table.name, table.model_name, len(table.columns),
            table.primary_key, len(table.foreign_keys),
        )
        tables.append(table)

    logger.info("Mapped %d tables", len(tables))
    return tables
