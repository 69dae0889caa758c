"""Behavior shared by generated base classes and the models derived from them."""

import logging
import types
from typing import Dict, Optional

from sqlalchemy.orm import DeclarativeBase, Session

from .errors import CompoundPrimaryKeyLookupError

logger = logging.getLogger(__name__)


class ModelMixin:
    """Mixed into every generated base class.

    The base class owns the engine (connection pool) for one automodel run;
    each table model subclasses it. Class attributes here must stay
    unannotated: declarative mapping treats annotations as columns.
    """

    engine = None
    namespace_registry = None
    registry_path = None  # namespace the models were registered in
    table_descriptor = None
    composite_primary_key = False
    column_aliases = None
    _session = None

    @classmethod
    def session(cls) -> Session:
        """Return the session shared by every model of this base."""
        base = cls.automodel_base()
        if base._session is None:
            base._session = Session(bind=base.engine)
        return base._session

    @classmethod
    def find(cls, ident, session: Optional[Session] = None):
        """Look up an instance by its primary key value.

        Raises:
            CompoundPrimaryKeyLookupError: if the table has a composite primary key
        """
        if cls.composite_primary_key:
            raise CompoundPrimaryKeyLookupError(
                cls.__name__, cls.table_descriptor.primary_key if cls.table_descriptor else None
            )
        return (session or cls.session()).get(cls, ident)

    @classmethod
    def automodel_base(cls) -> type:
        """The generated base class this model derives from."""
        for klass in cls.__mro__:
            if DeclarativeBase in klass.__bases__:
                return klass
        return cls

    @classmethod
    def models(cls) -> Dict[str, type]:
        """Generated models keyed by class name."""
        return {model.__name__: model for model in cls.automodel_base().__subclasses__()}

    @classmethod
    def disconnect(cls):
        """Close the shared session and dispose of the connection pool."""
        base = cls.automodel_base()
        if base._session is not None:
            base._session.close()
            base._session = None
        if base.engine is not None:
            base.engine.dispose()
            logger.debug("Disposed connection pool for %s", base.__name__)


def new_base(name: str, engine=None) -> type:
    """Create a base class with its own declarative registry and metadata."""
    def body(namespace):
        namespace["engine"] = engine
        namespace["__doc__"] = f"Base class for models generated by automodel ({name})."

    return types.new_class(name, (ModelMixin, DeclarativeBase), exec_body=body)
