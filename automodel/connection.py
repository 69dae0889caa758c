"""Resolution of connection specs into canonical configuration dicts."""

import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .config import settings
from .errors import ConnectionSpecError

logger = logging.getLogger(__name__)

# Keys of a mapping spec that become part of the URL
URL_KEYS = ("username", "password", "host", "port", "database", "query")


def resolve_spec(
    spec: Any,
    configurations: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build a configuration dict from a connection spec.

    A spec can be:
    - the name of an entry in configurations (settings.configurations by default)
    - a database URL ("sqlite:///library.db", "mssql+pyodbc://...")
    - a mapping with either a "url" or an "adapter" plus URL parts
      (username, password, host, port, database, query)

    Mappings may also carry "subschema", "namespace", and "engine_options".

    Returns:
        Dict with "url" (sqlalchemy URL), "adapter" (dialect name),
        "subschema", "namespace", and "engine_options"

    Raises:
        ConnectionSpecError: if the spec cannot be interpreted
    """
    if configurations is None:
        configurations = settings.configurations

    if isinstance(spec, URL):
        spec = {"url": spec}
    elif isinstance(spec, str):
        if spec in configurations:
            logger.debug("Resolving named configuration %s", spec)
            spec = configurations[spec]
        else:
            spec = {"url": spec}

    if not isinstance(spec, Mapping):
        raise ConnectionSpecError(
            f"Unsupported connection spec type: {type(spec).__name__}",
            details={"spec": repr(spec)}
        )

    url = _build_url(spec)
    config = {key: value for key, value in spec.items() if key not in URL_KEYS + ("url", "adapter")}
    config.update({
        "url": url,
        "adapter": url.get_backend_name(),
        "subschema": spec.get("subschema"),
        "namespace": spec.get("namespace"),
        "engine_options": dict(spec.get("engine_options") or {}),
    })
    return config


def _build_url(spec: Mapping[str, Any]) -> URL:
    """Build a SQLAlchemy URL from a mapping spec."""
    if spec.get("url"):
        try:
            return make_url(spec["url"])
        except ArgumentError as e:
            raise ConnectionSpecError(
                f"Invalid database URL: {e}",
                details={"url": str(spec["url"])}
            ) from e

    adapter = spec.get("adapter")
    if not adapter:
        raise ConnectionSpecError(
            "Connection spec needs a 'url' or an 'adapter'",
            details={"keys": sorted(spec.keys())}
        )

    return URL.create(
        drivername=str(adapter),
        username=spec.get("username"),
        password=spec.get("password"),
        host=spec.get("host"),
        port=int(spec["port"]) if spec.get("port") else None,
        database=spec.get("database"),
        query=dict(spec.get("query") or {}),
    )
