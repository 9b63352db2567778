"""
Database schema snapshot.

Holds the catalog names completion draws from: labels, relationship types,
procedures, functions, databases and aliases. A snapshot is read-only and
may be shared between requests; every field defaults to empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from lsprotocol.types import SignatureInformation


_EMPTY: Mapping = MappingProxyType({})

# Field name -> accepted keys, camelCase first
_KEYS = {
    "labels": ("labels",),
    "relationship_types": ("relationshipTypes", "relationship_types"),
    "procedure_signatures": ("procedureSignatures", "procedure_signatures"),
    "function_signatures": ("functionSignatures", "function_signatures"),
    "database_names": ("databaseNames", "database_names"),
    "alias_names": ("aliasNames", "alias_names"),
    "property_keys": ("propertyKeys", "property_keys"),
    "parameters": ("parameters",),
}


@dataclass(frozen=True)
class DbSchema:
    labels: tuple[str, ...] = ()
    relationship_types: tuple[str, ...] = ()
    procedure_signatures: Mapping[str, SignatureInformation] = field(
        default_factory=lambda: _EMPTY
    )
    function_signatures: Mapping[str, SignatureInformation] = field(
        default_factory=lambda: _EMPTY
    )
    database_names: tuple[str, ...] = ()
    alias_names: tuple[str, ...] = ()
    property_keys: tuple[str, ...] = ()
    parameters: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    @property
    def procedure_names(self) -> list[str]:
        return list(self.procedure_signatures)

    @property
    def function_names(self) -> list[str]:
        return list(self.function_signatures)

    @property
    def is_empty(self) -> bool:
        return not any(
            (
                self.labels,
                self.relationship_types,
                self.procedure_signatures,
                self.function_signatures,
                self.database_names,
                self.alias_names,
                self.property_keys,
                self.parameters,
            )
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> DbSchema:
        """
        Build a snapshot from loosely shaped data (parsed YAML/JSON or LSP
        initialization options).

        Keys are accepted in camelCase or snake_case. Missing or null entries
        become empty. Signatures may be given as a list of names, or as a
        mapping from name to a label string, a mapping with ``label`` and
        ``documentation`` keys, or null.

        Raises:
            TypeError: If ``data`` or one of its entries has the wrong shape.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Schema must be a mapping, got {type(data).__name__}"
            )

        values = {name: _lookup(data, keys) for name, keys in _KEYS.items()}

        parameters = values["parameters"] or {}
        if not isinstance(parameters, Mapping):
            raise TypeError("'parameters' must be a mapping")

        return cls(
            labels=_names(values["labels"], "labels"),
            relationship_types=_names(
                values["relationship_types"], "relationshipTypes"
            ),
            procedure_signatures=_signatures(
                values["procedure_signatures"], "procedureSignatures"
            ),
            function_signatures=_signatures(
                values["function_signatures"], "functionSignatures"
            ),
            database_names=_names(values["database_names"], "databaseNames"),
            alias_names=_names(values["alias_names"], "aliasNames"),
            property_keys=_names(values["property_keys"], "propertyKeys"),
            parameters=MappingProxyType(dict(parameters)),
        )


def _lookup(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _names(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, Mapping)) or not hasattr(value, "__iter__"):
        raise TypeError(f"'{key}' must be a list of names")
    return tuple(str(name) for name in value)


def _signature(name: str, value: Any) -> SignatureInformation:
    if value is None:
        return SignatureInformation(label=name)
    if isinstance(value, str):
        return SignatureInformation(label=value)
    if isinstance(value, Mapping):
        return SignatureInformation(
            label=str(value.get("label") or name),
            documentation=value.get("documentation"),
        )
    if isinstance(value, SignatureInformation):
        return value
    raise TypeError(f"Invalid signature for '{name}'")


def _signatures(
    value: Any, key: str
) -> Mapping[str, SignatureInformation]:
    if value is None:
        return _EMPTY
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, (list, tuple)):
        items = ((name, None) for name in value)
    else:
        raise TypeError(f"'{key}' must be a mapping or a list of names")

    return MappingProxyType(
        {str(name): _signature(str(name), sig) for name, sig in items}
    )
