"""Naming conventions shared by the emitters.

XML names may contain characters that are not legal in identifiers
(``-``, ``.``) and two identities may share a local name while living in
different namespaces. :class:`TypeNamer` maps every element identity to one
unique, deterministic type name for the whole run.
"""

from __future__ import annotations

import re
from typing import Dict, Set

from .config import InferenceConfig
from .models import AttributeRecord, ElementNode

_INVALID_CHARS = re.compile(r"\W")


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


def clean_name(value: str) -> str:
    """Turn an XML name into a valid identifier fragment."""
    cleaned = _INVALID_CHARS.sub("_", value)
    if cleaned[:1].isdigit():
        cleaned = "_" + cleaned
    return cleaned


class TypeNamer:
    """Assign target type names to element identities.

    Names are ``prefix + [NsPrefix_] + Name + suffix``. When two identities
    still end up with the same name (e.g. a default-namespace ``a`` and an
    unqualified ``a``), the identity requested later gets a numeric suffix.
    The mapping is filled in the order names are requested, so emitting the
    same tree twice yields the same names.
    """

    def __init__(self, config: InferenceConfig) -> None:
        self.config = config
        self._names: Dict[str, str] = {}
        self._taken: Set[str] = set()

    def type_name(self, node: ElementNode) -> str:
        name = self._names.get(node.key)
        if name is not None:
            return name

        base = self._base_name(node)
        name, counter = base, 1
        while name in self._taken:
            counter += 1
            name = f"{base}{counter}"
        self._names[node.key] = name
        self._taken.add(name)
        return name

    def _base_name(self, node: ElementNode) -> str:
        middle = capitalize_first(clean_name(node.name))
        if node.prefix:
            middle = f"{capitalize_first(clean_name(node.prefix))}_{middle}"
        return f"{self.config.name_prefix}{middle}{self.config.name_suffix}"

    def attribute_field(self, record: AttributeRecord) -> str:
        middle = capitalize_first(clean_name(record.name))
        if record.prefix:
            middle = f"{capitalize_first(clean_name(record.prefix))}_{middle}"
        return f"{self.config.attribute_prefix}{middle}"

    def json_name(self, name: str, prefix: str) -> str:
        if self.config.namespace_in_json_name and prefix:
            return f"{prefix}__{name}"
        return name
