"""Database-specific type mapping strategies."""

from abc import ABC, abstractmethod

from sqlalchemy import exc
from sqlalchemy import types as sqltypes


class TypeMapper(ABC):
    """Abstract base class for database type mapping."""

    @abstractmethod
    def to_semantic_type(self, db_type) -> str:
        """Convert a database type to a semantic column type."""
        pass

    @abstractmethod
    def to_sql_type(self, semantic_type: str):
        """Convert a semantic column type to a SQLAlchemy type."""
        pass


class SQLAlchemyTypeMapper(TypeMapper):
    """Type mapper for types reflected through SQLAlchemy."""

    SQL_TYPES = {
        "string": sqltypes.String,
        "text": sqltypes.Text,
        "integer": sqltypes.Integer,
        "float": sqltypes.Float,
        "decimal": sqltypes.Numeric,
        "boolean": sqltypes.Boolean,
        "date": sqltypes.Date,
        "datetime": sqltypes.DateTime,
        "time": sqltypes.Time,
        "binary": sqltypes.LargeBinary,
        "json": sqltypes.JSON,
    }

    def to_semantic_type(self, db_type) -> str:
        """Convert a SQLAlchemy type (or type string) to a semantic type."""
        if isinstance(db_type, sqltypes.Boolean):
            return "boolean"

        try:
            type_upper = str(db_type).upper()
        except exc.CompileError:
            # Some dialect-specific types cannot compile without a dialect
            type_upper = type(db_type).__name__.upper()

        # Boolean types (BIT is SQL Server's boolean)
        if "BOOL" in type_upper or type_upper == "BIT":
            return "boolean"

        # Date/Time types
        elif "TIMESTAMP" in type_upper or "DATETIME" in type_upper:
            return "datetime"
        elif type_upper == "DATE":
            return "date"
        elif type_upper.startswith("TIME"):
            return "time"

        elif "INTERVAL" in type_upper:
            return "unknown"

        # Integer types
        elif "INT" in type_upper or type_upper == "SERIAL":
            return "integer"

        # Decimal and floating point types
        elif any(t in type_upper for t in ["NUMERIC", "DECIMAL", "NUMBER", "MONEY"]):
            return "decimal"
        elif any(t in type_upper for t in ["FLOAT", "DOUBLE", "REAL"]):
            return "float"

        # String types
        elif any(t in type_upper for t in ["TEXT", "CLOB"]):
            return "text"
        elif any(t in type_upper for t in ["VARCHAR", "CHAR", "STRING", "UUID"]):
            return "string"

        # Binary types
        elif any(t in type_upper for t in ["BLOB", "BYTEA", "BINARY", "RAW"]):
            return "binary"

        elif "JSON" in type_upper:
            return "json"

        return "unknown"

    def to_sql_type(self, semantic_type: str):
        """Convert a semantic type to a SQLAlchemy type instance."""
        return self.SQL_TYPES.get(semantic_type, sqltypes.NullType)()
