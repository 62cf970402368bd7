"""
Structured ABI types parsed from output parameter descriptors.

A descriptor is either a type string (`"uint256"`, `"address[]"`, `"bytes32[4]"`) or a
struct object `{"type": "tuple[]", "elems": [...]}` whose elements are descriptors again.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List

from app.core.exceptions import AbiTypeParseError

ARRAY_REGEX_WITH_SIZE = re.compile(r"^(.+?)\[(\d*)]$")
STRUCT_TYPE_NAMES = ("tuple", "struct")

BASIC_TYPES = frozenset(
    ["address", "bool", "string", "bytes", "byte", "uint", "int"]
    + [f"uint{bits}" for bits in range(8, 257, 8)]
    + [f"int{bits}" for bits in range(8, 257, 8)]
    + [f"bytes{size}" for size in range(1, 33)]
)

# Solidity aliases that eth_abi expects in canonical form
_CANONICAL_ALIASES = {"uint": "uint256", "int": "int256", "byte": "bytes1"}

# Types whose indexed event values are stored as a keccak hash in the topic
_DYNAMIC_BASIC_TYPES = frozenset({"string", "bytes"})


class AbiType(ABC):
    """Base class of parsed ABI types"""

    @property
    @abstractmethod
    def canonical(self) -> str:
        """Type name as used in canonical signatures"""

    @property
    @abstractmethod
    def is_dynamic(self) -> bool:
        """Whether the encoding has no fixed size"""


@dataclass(frozen=True)
class BasicType(AbiType):
    name: str

    @property
    def canonical(self) -> str:
        return _CANONICAL_ALIASES.get(self.name, self.name)

    @property
    def is_dynamic(self) -> bool:
        return self.name in _DYNAMIC_BASIC_TYPES


@dataclass(frozen=True)
class DynamicArrayType(AbiType):
    element: AbiType

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[]"

    @property
    def is_dynamic(self) -> bool:
        return True


@dataclass(frozen=True)
class StaticArrayType(AbiType):
    element: AbiType
    length: int

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[{self.length}]"

    @property
    def is_dynamic(self) -> bool:
        return self.element.is_dynamic


@dataclass(frozen=True)
class StructType(AbiType):
    elements: List[AbiType]

    @property
    def canonical(self) -> str:
        return "(" + ",".join(e.canonical for e in self.elements) + ")"

    @property
    def is_dynamic(self) -> bool:
        return any(e.is_dynamic for e in self.elements)


def parse_output_parameter(node: Any) -> AbiType:
    """Parse a decoded JSON descriptor (string or struct object) into an AbiType"""
    if isinstance(node, str):
        return _parse_type(node, _resolve_basic_type)
    if isinstance(node, dict):
        return _parse_struct(node)
    raise AbiTypeParseError("invalid value type; expected string or object")


def _resolve_basic_type(type_name: str) -> AbiType:
    if type_name not in BASIC_TYPES:
        raise AbiTypeParseError(f"unknown type: {type_name}")
    return BasicType(type_name)


def _parse_type(type_name: str, type_resolver: Callable[[str], AbiType]) -> AbiType:
    match = ARRAY_REGEX_WITH_SIZE.match(type_name)
    if match is None:
        return type_resolver(type_name)

    element_type, array_size = match.groups()
    element = _parse_type(element_type, type_resolver)
    if array_size == "":
        return DynamicArrayType(element)
    return StaticArrayType(element, int(array_size))


def _parse_struct(node: dict) -> AbiType:
    struct_type = node.get("type")
    if not isinstance(struct_type, str):
        raise AbiTypeParseError("missing struct type")

    def resolve_struct(type_name: str) -> AbiType:
        if type_name not in STRUCT_TYPE_NAMES:
            raise AbiTypeParseError("invalid struct type")
        elems = node.get("elems")
        if not isinstance(elems, list):
            raise AbiTypeParseError("invalid or missing struct elements")
        return StructType([parse_output_parameter(e) for e in elems])

    return _parse_type(struct_type, resolve_struct)
