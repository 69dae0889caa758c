"""Error types for automodel."""

from typing import Optional, Dict, Any, Iterable


class AutomodelError(Exception):
    """Base exception for automodel errors."""

    def __init__(self, message: str, code: str = "AUTOMODEL_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class DuplicateAdapterError(AutomodelError):
    """The same adapter was registered with an AdapterRegistry more than once."""

    def __init__(self, adapter: str):
        super().__init__(
            f"Adapter already registered: {adapter}",
            code="DUPLICATE_ADAPTER",
            details={"adapter": adapter}
        )
        self.adapter = adapter


class NameCollisionError(AutomodelError):
    """Generated model names collide with names already bound in the target namespace."""

    def __init__(self, names: Iterable[str], namespace: Optional[str] = None):
        names = sorted(set(names))
        super().__init__(
            f"Model name collision: {', '.join(names)}",
            code="NAME_COLLISION",
            details={"names": names, "namespace": namespace}
        )
        self.names = names
        self.namespace = namespace


class CompoundPrimaryKeyLookupError(AutomodelError):
    """Single-key lookup called on a model backed by a composite primary key."""

    def __init__(self, model_name: str, primary_key: Optional[Iterable[str]] = None):
        super().__init__(
            f"Cannot find {model_name} by a single key: table has a composite primary key",
            code="COMPOUND_PRIMARY_KEY_LOOKUP",
            details={"model": model_name, "primary_key": list(primary_key or [])}
        )
        self.model_name = model_name


class ConnectionSpecError(AutomodelError):
    """A connection spec could not be resolved into a configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_SPEC", details=details)
