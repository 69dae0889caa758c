"""Scrapes a database and generates one model class per table.

automodel() is the entrypoint. It runs a ModelBuilder through these states:

    INIT -> CONNECTION_SPEC_RESOLVED -> CONNECTION_ESTABLISHED -> TABLES_MAPPED
         -> COLLISION_CHECKED -> TYPES_DEFINED -> RELATIONSHIPS_WIRED -> DONE

Nothing is defined or registered in the target namespace until the name
collision check has passed.
"""

import logging
import types
import uuid
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Tuple

from sqlalchemy import Column, Table, create_engine
from sqlalchemy.orm import relationship, synonym

from . import naming
from .config import settings
from .connection import resolve_spec
from .database.adapters import AdapterRegistry
from .database.base import SchemaDriver
from .database.mapper import map_tables
from .database.models import ForeignKeyDescriptor, TableDescriptor
from .database.type_mappers import SQLAlchemyTypeMapper
from .errors import NameCollisionError
from .namespace import NamespaceRegistry
from .orm import new_base

logger = logging.getLogger(__name__)


class BuilderState(str, Enum):
    """Stages of a ModelBuilder run."""
    INIT = "init"
    CONNECTION_SPEC_RESOLVED = "connection_spec_resolved"
    CONNECTION_ESTABLISHED = "connection_established"
    TABLES_MAPPED = "tables_mapped"
    COLLISION_CHECKED = "collision_checked"
    TYPES_DEFINED = "types_defined"
    RELATIONSHIPS_WIRED = "relationships_wired"
    DONE = "done"


class ModelBuilder:
    """One automodel run: from a connection spec to a set of wired model classes."""

    def __init__(
        self,
        spec: Any,
        namespace: Optional[str] = None,
        subschema: Optional[str] = None,
        registry: Optional[NamespaceRegistry] = None,
        adapters: Optional[AdapterRegistry] = None,
        driver_factory: Optional[Callable[[Any], SchemaDriver]] = None,
        configurations: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ):
        self.spec = spec
        self.namespace = namespace
        self.subschema = subschema
        self.registry = registry if registry is not None else NamespaceRegistry()
        self.adapters = adapters
        self.driver_factory = driver_factory
        self.configurations = configurations

        self.state = BuilderState.INIT
        self.config: Optional[dict] = None
        self.base: Optional[type] = None
        self.engine = None
        self.tables: List[TableDescriptor] = []
        self._registered: List[Tuple[str, Optional[str]]] = []
        self._type_mapper = SQLAlchemyTypeMapper()

    def _transition(self, state: BuilderState):
        logger.info("%s: %s -> %s", self.base.__name__ if self.base else "automodel", self.state.value, state.value)
        self.state = state

    def run(self) -> type:
        """Run every stage and return the base class of the generated models.

        If any stage after connect() fails, the connection pool is disposed
        and everything registered by this run is unregistered before the
        error propagates.
        """
        self.resolve()
        self.connect()
        try:
            self.map()
            self.check_collisions()
            self.define_models()
            self.wire_relationships()
        except Exception:
            self.discard()
            raise
        self._transition(BuilderState.DONE)

        logger.info(
            "Generated %d models in %s",
            len(self.tables), self.namespace or self.registry.root.name,
        )
        return self.base

    def resolve(self):
        """Resolve the spec into a configuration dict."""
        self.config = resolve_spec(self.spec, self.configurations)
        self.namespace = self.namespace or self.config.get("namespace") or settings.default_namespace
        self.subschema = self.subschema or self.config.get("subschema")
        self._transition(BuilderState.CONNECTION_SPEC_RESOLVED)

    def connect(self):
        """Create the base class and its dedicated connection pool.

        The base class doubles as the connection handler, so it gets a unique
        name per run. It is registered under settings.connectors_namespace
        once the collision check has passed.
        """
        name = f"CH_{uuid.uuid4().hex}"
        self.engine = create_engine(self.config["url"], **self.config["engine_options"])
        self.base = new_base(name, engine=self.engine)
        self.base.namespace_registry = self.registry
        self.base.registry_path = self.namespace
        self._transition(BuilderState.CONNECTION_ESTABLISHED)

    def map(self):
        """Describe every table in the target database."""
        driver = self.driver_factory(self.engine) if self.driver_factory else None
        self.tables = map_tables(
            self.engine,
            subschema=self.subschema,
            adapter=self.config["adapter"],
            adapters=self.adapters,
            driver=driver,
        )
        self._transition(BuilderState.TABLES_MAPPED)

    def check_collisions(self):
        """Abort if any model name is already bound in the target namespace.

        Names repeated within this run count as collisions too. The registry
        is left untouched on collision; run() then disposes the connection
        pool and discards the base class.

        Raises:
            NameCollisionError: carrying the colliding names
        """
        defined_names = self.registry.names(self.namespace)
        potential_names = [table.model_name for table in self.tables]
        repeated = {name for name in potential_names if potential_names.count(name) > 1}

        collisions = (defined_names & set(potential_names)) | repeated
        if collisions:
            logger.info("Name collision in %s: %s", self.namespace or "root", sorted(collisions))
            raise NameCollisionError(collisions, namespace=self.namespace)

        self._register(self.base, self.base.__name__, settings.connectors_namespace)
        self._transition(BuilderState.COLLISION_CHECKED)

    def define_models(self):
        """Define and register one model class per table."""
        for table in self.tables:
            model = self.define_model(table)
            self._register(model, table.model_name, self.namespace)
        self._transition(BuilderState.TYPES_DEFINED)

    def _register(self, type_: type, name: str, within: Optional[str]):
        self.registry.register_type(type_, name, within=within)
        self._registered.append((name, within))

    def discard(self):
        """Dispose the connection pool and unregister everything this run bound."""
        if self.engine is not None:
            self.engine.dispose()
        for name, within in reversed(self._registered):
            self.registry.unregister(name, within=within)
        self._registered = []
        self.base = None
        self.tables = []

    def define_model(self, table: TableDescriptor) -> type:
        """Define the model class for one table, with aliases for its columns.

        Columns named like a base attribute ("find", "session", "metadata")
        are mapped under that name plus a trailing underscore ("find_").
        """
        sa_table = self._build_table(table)

        attributes = {
            "__table__": sa_table,
            "table_descriptor": table,
            "composite_primary_key": table.composite_primary_key,
            "column_aliases": table.column_aliases,
        }
        for column in table.columns:
            key = self._attribute_key(table, column.name)
            if key != column.name:
                logger.debug("Mapping %s.%s as %s: shadows a base attribute", table.model_name, column.name, key)
                attributes[key] = sa_table.c[column.name]
                table.column_aliases.pop(column.name, None)
                table.column_aliases[key] = column
        if not table.primary_key_columns:
            # The ORM needs some identity; fall back to the full row
            attributes["__mapper_args__"] = {"primary_key": list(sa_table.columns)}

        for column in table.columns:
            alias = naming.normalize_column_name(column)
            if not alias or alias in table.column_aliases:
                continue
            if hasattr(self.base, alias):
                logger.debug("Skipping alias %s.%s: shadows a base attribute", table.model_name, alias)
                continue
            table.column_aliases[alias] = column
            attributes[alias] = synonym(self._attribute_key(table, column.name))

        table.model = types.new_class(
            table.model_name,
            (self.base,),
            exec_body=lambda namespace: namespace.update(attributes),
        )
        logger.debug("Defined %s for table %s", table.model_name, table.name)
        return table.model

    def _attribute_key(self, table: TableDescriptor, name: str) -> str:
        """Attribute name a column is mapped under."""
        taken = {column.name for column in table.columns}
        key = name
        while hasattr(self.base, key) or (key != name and key in taken):
            key += "_"
        return key

    def _build_table(self, table: TableDescriptor) -> Table:
        primary_key = set(table.primary_key_columns)
        columns = [
            Column(
                column.name,
                column.sql_type if column.sql_type is not None else self._type_mapper.to_sql_type(column.type),
                primary_key=column.name in primary_key,
                nullable=column.nullable,
            )
            for column in table.columns
        ]
        return Table(table.base_name, self.base.metadata, *columns, schema=table.schema)

    def wire_relationships(self):
        """Declare a many-to-one association for every resolvable foreign key.

        Runs only once every model exists, so targets can be referenced
        directly. Foreign keys whose source or target table was not mapped in
        this run are skipped, as are self-references.
        """
        tables_by_name = {table.base_name: table for table in self.tables}

        for table in self.tables:
            for fk in table.foreign_keys:
                from_table = tables_by_name.get(fk.from_base_name)
                if from_table is None:
                    continue

                to_table = tables_by_name.get(fk.to_base_name)
                if to_table is None:
                    continue

                if from_table is to_table:
                    logger.debug("Skipping self-referential foreign key %s on %s", fk.name, from_table.name)
                    continue

                self.define_association(from_table, to_table, fk)

        self._transition(BuilderState.RELATIONSHIPS_WIRED)

    def define_association(self, from_table: TableDescriptor, to_table: TableDescriptor, fk: ForeignKeyDescriptor):
        """Attach a many-to-one accessor for fk to the source model.

        The accessor is named after the target's raw base name ("Authors"),
        with an alias from its model name ("author").
        """
        source, target = from_table.model, to_table.model
        source_column = source.__table__.c.get(fk.column)
        target_column = target.__table__.c.get(fk.primary_key)
        if source_column is None or target_column is None:
            logger.warning(
                "Skipping foreign key %s: %s.%s -> %s.%s not found",
                fk.name, from_table.name, fk.column, to_table.name, fk.primary_key,
            )
            return

        name = to_table.base_name
        if hasattr(source, name):
            logger.debug("Skipping association %s.%s: name already taken", from_table.model_name, name)
            return

        setattr(source, name, relationship(
            target,
            primaryjoin=source_column == target_column,
            foreign_keys=[source_column],
        ))

        alias = naming.normalize_name(to_table.model_name)
        if alias and alias != name and not hasattr(source, alias):
            setattr(source, alias, synonym(name))

        logger.debug(
            "%s.%s -> %s via %s%s",
            from_table.model_name, name, to_table.model_name, fk.column,
            " (inferred)" if fk.synthesized else "",
        )


def automodel(
    spec: Any,
    namespace: Optional[str] = None,
    subschema: Optional[str] = None,
    registry: Optional[NamespaceRegistry] = None,
    adapters: Optional[AdapterRegistry] = None,
    driver_factory: Optional[Callable[[Any], SchemaDriver]] = None,
) -> type:
    """Scrape a database and generate a model class for each of its tables.

    Args:
        spec: Connection spec: a configuration name, a database URL, or a
              mapping (see automodel.connection.resolve_spec). Mappings may
              carry "subschema" and "namespace" options.
        namespace: Namespace path for the generated models (e.g. "NewDB" or
                   "WeirdDB::Models"); overrides the spec's "namespace".
                   Defaults to settings.default_namespace, else the registry root.
        subschema: Additional namespace table names are prefixed with
                   (e.g. "dbo"); overrides the spec's "subschema".
        registry: Namespace registry to register models in. A fresh one is
                  created if omitted; either way it is reachable as
                  base.namespace_registry.
        adapters: Adapter override registry (default: process-wide registry)
        driver_factory: Called with the engine to build the native schema driver

    Returns:
        The base class of every generated model. base.__subclasses__() lists
        the models; base.models() maps their names to them.

    Raises:
        NameCollisionError: if a generated model name is already bound in
                            the target namespace
    """
    builder = ModelBuilder(
        spec,
        namespace=namespace,
        subschema=subschema,
        registry=registry,
        adapters=adapters,
        driver_factory=driver_factory,
    )
    return builder.run()
