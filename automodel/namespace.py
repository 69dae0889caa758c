"""Caller-owned registry of generated types, organized by namespace path.

Paths are segment lists written with "::" or "." separators
("WeirdDB::Models", "weird_db.models"). The empty path is the registry root.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

logger = logging.getLogger(__name__)

_SEPARATOR = re.compile(r'::|\.')


def split_path(path: Optional[str]) -> List[str]:
    """Split a namespace path into its segments."""
    if not path:
        return []
    return [segment for segment in _SEPARATOR.split(str(path)) if segment]


@dataclass
class NamespaceNode:
    """One namespace segment: nested namespaces plus the types bound in it."""
    name: str
    children: Dict[str, 'NamespaceNode'] = field(default_factory=dict)
    types: Dict[str, type] = field(default_factory=dict)

    def names(self) -> Set[str]:
        """Every name bound in this namespace, nested namespaces included."""
        return set(self.children) | set(self.types)


class NamespaceRegistry:
    """Tree of namespaces in which generated types are registered."""

    ROOT = "Models"

    def __init__(self, root: str = ROOT):
        self.root = NamespaceNode(name=root)

    def node(self, within: Optional[str] = None, create: bool = False) -> Optional[NamespaceNode]:
        """Resolve a namespace path to its node.

        Args:
            within: Namespace path (root if empty)
            create: Create missing segments instead of returning None

        Returns:
            The node, or None if a segment is missing and create is False
        """
        node = self.root
        for segment in split_path(within):
            child = node.children.get(segment)
            if child is None:
                if not create:
                    return None
                child = node.children[segment] = NamespaceNode(name=segment)
                logger.debug("Created namespace %s", segment)
            node = child
        return node

    def register_type(self, type_: type, name: str, within: Optional[str] = None) -> type:
        """Bind a type to a name in a namespace, creating the namespace if needed.

        No collision detection happens here; rebinding a name replaces the
        previous type. Callers must check names() beforehand.

        Returns:
            The registered type
        """
        node = self.node(within, create=True)
        node.types[name] = type_
        return type_

    def unregister(self, name: str, within: Optional[str] = None) -> Optional[type]:
        """Remove a binding, returning the type that was bound (if any)."""
        node = self.node(within)
        if node is None:
            return None
        return node.types.pop(name, None)

    def names(self, within: Optional[str] = None) -> Set[str]:
        """Snapshot of the names bound in a namespace (empty if it does not exist)."""
        node = self.node(within)
        return node.names() if node is not None else set()

    def lookup(self, path: str) -> Optional[type]:
        """Find a type by its full path ("NewDB::Models::Author")."""
        segments = split_path(path)
        if not segments:
            return None
        node = self.node("::".join(segments[:-1]))
        if node is None:
            return None
        return node.types.get(segments[-1])

    def __contains__(self, path: str) -> bool:
        return self.lookup(path) is not None
