"""Deterministic name normalization for tables, columns, and models."""

import re
from typing import Any

# Ordered from most to least specific; the first matching rule wins.
SINGULAR_RULES = [
    (r'(quiz)zes$', r'\1'),
    (r'(matr)ices$', r'\1ix'),
    (r'(vert|ind)ices$', r'\1ex'),
    (r'^(ox)en$', r'\1'),
    (r'(alias|status)(es)?$', r'\1'),
    (r'(octop|vir)(us|i)$', r'\1us'),
    (r'(cris|test)(is|es)$', r'\1is'),
    (r'(shoe)s$', r'\1'),
    (r'(o)es$', r'\1'),
    (r'(bus)(es)?$', r'\1'),
    (r'(m|l)ice$', r'\1ouse'),
    (r'(x|ch|ss|sh)es$', r'\1'),
    (r'(m)ovies$', r'\1ovie'),
    (r'(s)eries$', r'\1eries'),
    (r'([^aeiouy]|qu)ies$', r'\1y'),
    (r'([lr])ves$', r'\1f'),
    (r'(tive)s$', r'\1'),
    (r'(hive)s$', r'\1'),
    (r'([^f])ves$', r'\1fe'),
    (r'(analy|ba|diagno|parenthe|progno|synop|the)(sis|ses)$', r'\1sis'),
    (r'([ti])a$', r'\1um'),
    (r'(n)ews$', r'\1ews'),
    (r'(ss|us|is)$', r'\1'),
    (r's$', ''),
]

IRREGULAR_PLURALS = {
    'people': 'person',
    'men': 'man',
    'women': 'woman',
    'children': 'child',
    'geese': 'goose',
    'teeth': 'tooth',
    'feet': 'foot',
}

UNCOUNTABLE = {
    'equipment', 'information', 'rice', 'money', 'species',
    'series', 'fish', 'sheep', 'jeans', 'police', 'metadata',
}

_NON_ALPHANUMERIC = re.compile(r'[^A-Za-z0-9]+')
_ACRONYM_HUMP = re.compile(r'([A-Z\d]+)([A-Z][a-z])')
_CAMEL_HUMP = re.compile(r'([a-z\d])([A-Z])')
_BOOLEAN_PREFIX = re.compile(r'^(?:is_)+')


def underscore(name: str) -> str:
    """Convert CamelCase to snake_case (AuthorID -> author_id)."""
    name = _ACRONYM_HUMP.sub(r'\1_\2', name)
    name = _CAMEL_HUMP.sub(r'\1_\2', name)
    return name.replace('-', '_').lower()


def normalize_name(name: Any) -> str:
    """Return the given name in canonical lower snake form.

    Runs of characters outside ASCII letters and digits collapse to a single
    underscore, and camel-case humps are split, so "Author ID", "AuthorID"
    and "author_id" all normalize to "author_id". Applying this twice is a
    no-op.
    """
    name = _NON_ALPHANUMERIC.sub('_', str(name))
    return underscore(name).strip('_')


def normalize_column_name(column: Any) -> str:
    """Return a normalized accessor name for a column.

    Boolean columns lose their leading "is_" segment (IsActive -> active).
    Date and datetime columns are not given "_on"/"_at" suffixes; names like
    "BirthDate" would come out wrong without a curated list of exceptions.
    """
    name = normalize_name(column.name)
    if column.type == 'boolean':
        name = _BOOLEAN_PREFIX.sub('', name) or name
    return name


def singularize(word: str) -> str:
    """Singularize the last underscore-separated segment of a word."""
    head, sep, last = word.rpartition('_')
    lower = last.lower()

    if not lower or lower in UNCOUNTABLE:
        return word
    if lower in IRREGULAR_PLURALS:
        return f"{head}{sep}{IRREGULAR_PLURALS[lower]}"

    for pattern, replacement in SINGULAR_RULES:
        if re.search(pattern, lower):
            return f"{head}{sep}{re.sub(pattern, replacement, lower)}"
    return word


def camelize(word: str) -> str:
    """Convert snake_case to CamelCase (book_author -> BookAuthor)."""
    return ''.join(part[:1].upper() + part[1:] for part in word.split('_') if part)


def model_name(base_name: str) -> str:
    """Derive a singular CamelCase model name from a base table name.

    "Authors" -> "Author", "order_details" -> "OrderDetail",
    "Book Categories" -> "BookCategory".
    """
    return camelize(singularize(normalize_name(base_name)))


def table_key(table_name: str) -> str:
    """Comparison key used to match singular references against table names."""
    return singularize(normalize_name(table_name))
