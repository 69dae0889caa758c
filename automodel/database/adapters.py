"""Per-adapter overrides for schema introspection.

Some database adapters cannot list tables, columns, primary keys, or
foreign keys through the standard reflection calls. Registering an adapter
supplies replacements for any of those lookups; each is optional and is
matched to a connection by the adapter id (the SQLAlchemy dialect name).

    adapter_registry.register(
        "mssql",
        tables=lambda connection: [...],
        foreign_keys=lambda connection, table_name: [...],
    )
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .base import Capability
from ..errors import DuplicateAdapterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdapterRegistration:
    """Introspection overrides registered for one adapter.

    Signatures:
        tables(connection) -> iterable of table names
        columns(connection, table_name) -> list of ColumnDescriptor
        primary_key(connection, table_name) -> None, str, or tuple of str
        foreign_keys(connection, table_name) -> list of ForeignKeyDescriptor
    """
    adapter: Optional[str] = None
    tables: Optional[Callable[..., Any]] = None
    columns: Optional[Callable[..., Any]] = None
    primary_key: Optional[Callable[..., Any]] = None
    foreign_keys: Optional[Callable[..., Any]] = None

    def has(self, capability: Capability) -> bool:
        """Whether this registration overrides the given lookup."""
        return self.get(capability) is not None

    def get(self, capability: Capability) -> Optional[Callable[..., Any]]:
        return getattr(self, Capability(capability).value)


class AdapterRegistry:
    """Maps adapter ids to their introspection overrides."""

    def __init__(self):
        self._registrations: Dict[str, AdapterRegistration] = {}

    @staticmethod
    def _key(adapter: str) -> str:
        return str(adapter).lower()

    def register(
        self,
        adapter: str,
        tables: Optional[Callable[..., Any]] = None,
        columns: Optional[Callable[..., Any]] = None,
        primary_key: Optional[Callable[..., Any]] = None,
        foreign_keys: Optional[Callable[..., Any]] = None,
    ) -> AdapterRegistration:
        """Register overrides for an adapter.

        Raises:
            DuplicateAdapterError: if the adapter is already registered
        """
        key = self._key(adapter)
        if key in self._registrations:
            raise DuplicateAdapterError(key)

        registration = AdapterRegistration(
            adapter=key,
            tables=tables,
            columns=columns,
            primary_key=primary_key,
            foreign_keys=foreign_keys,
        )
        self._registrations[key] = registration
        logger.debug(
            "Registered adapter %s (overrides: %s)",
            key,
            [c.value for c in Capability if registration.has(c)],
        )
        return registration

    def lookup(self, adapter: Optional[str]) -> AdapterRegistration:
        """Return the registration for an adapter, or an empty one."""
        if adapter is None:
            return AdapterRegistration()
        return self._registrations.get(self._key(adapter), AdapterRegistration(adapter=self._key(adapter)))

    def __contains__(self, adapter: str) -> bool:
        return self._key(adapter) in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)


# Process-wide default registry
adapter_registry = AdapterRegistry()


def register_adapter(adapter: str, **overrides) -> AdapterRegistration:
    """Register overrides with the default adapter registry."""
    return adapter_registry.register(adapter, **overrides)
