"""Database introspection for automodel.

Schema lookups go through SQLAlchemy reflection by default, with per-adapter
overrides registered in an AdapterRegistry.
"""

from .models import ColumnDescriptor, ForeignKeyDescriptor, TableDescriptor
from .base import Capability, SchemaDriver
from .adapters import AdapterRegistry, AdapterRegistration, adapter_registry, register_adapter
from .type_mappers import TypeMapper, SQLAlchemyTypeMapper
from .sqlalchemy_driver import SQLAlchemyDriver
from .inspector import SchemaInspector
from .mapper import map_tables, normalize_subschema

__all__ = [
    # Data models
    "ColumnDescriptor",
    "ForeignKeyDescriptor",
    "TableDescriptor",
    # Base classes
    "Capability",
    "SchemaDriver",
    # Adapter overrides
    "AdapterRegistry",
    "AdapterRegistration",
    "adapter_registry",
    "register_adapter",
    # Type mappers
    "TypeMapper",
    "SQLAlchemyTypeMapper",
    # Introspection
    "SQLAlchemyDriver",
    "SchemaInspector",
    "map_tables",
    "normalize_subschema",
]
