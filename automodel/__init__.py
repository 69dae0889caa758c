"""automodel - generate SQLAlchemy models by scraping a database schema."""

from .builder import BuilderState, ModelBuilder, automodel
from .database.adapters import register_adapter
from .errors import (
    AutomodelError,
    CompoundPrimaryKeyLookupError,
    ConnectionSpecError,
    DuplicateAdapterError,
    NameCollisionError,
)
from .namespace import NamespaceRegistry

__version__ = "0.1.0"

__all__ = [
    "automodel",
    "ModelBuilder",
    "BuilderState",
    "register_adapter",
    "NamespaceRegistry",
    "AutomodelError",
    "CompoundPrimaryKeyLookupError",
    "ConnectionSpecError",
    "DuplicateAdapterError",
    "NameCollisionError",
]
