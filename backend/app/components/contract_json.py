"""
Models for artifact.json and manifest.json files.

artifact.json is compiler output and is treated as ground truth for on-chain structure;
manifest.json (and interface manifests) carry hand-authored decorations keyed by signature.
Both are camelCase on the wire and immutable once loaded.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class JsonModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase wire names"""
        return self.model_dump(mode="json", by_alias=True)


def _ordered_unique(values: Optional[List[str]]) -> List[str]:
    return list(dict.fromkeys(values or []))


# --- artifact.json ---

class AbiInputOutput(JsonModel):
    components: Optional[List[AbiInputOutput]] = None
    internal_type: Optional[str] = None
    name: str = ""
    type: str = ""
    indexed: Optional[bool] = None


# Placeholder used when a function declares more return decorators than ABI outputs
EMPTY_ABI_INPUT_OUTPUT = AbiInputOutput(components=None, internal_type="", name="", type="", indexed=None)


class AbiObject(JsonModel):
    anonymous: Optional[bool] = None
    inputs: Optional[List[AbiInputOutput]] = None
    outputs: Optional[List[AbiInputOutput]] = None
    state_mutability: Optional[str] = None
    name: Optional[str] = None
    type: str


class ArtifactJson(JsonModel):
    contract_name: str
    source_name: str
    abi: List[AbiObject]
    bytecode: str
    deployed_bytecode: str
    link_references: Optional[Dict[str, Any]] = None
    deployed_link_references: Optional[Dict[str, Any]] = None


# --- manifest.json ---

class TypeDecorator(JsonModel):
    name: str
    description: str
    recommended_types: List[str] = Field(default_factory=list)
    parameters: Optional[List[TypeDecorator]] = None
    hints: Optional[List[Any]] = None


class ReturnTypeDecorator(JsonModel):
    name: str
    description: str
    solidity_type: str
    recommended_types: List[str] = Field(default_factory=list)
    parameters: Optional[List[ReturnTypeDecorator]] = None
    hints: Optional[List[Any]] = None


class EventTypeDecorator(JsonModel):
    name: str
    description: str
    indexed: bool = False
    recommended_types: List[str] = Field(default_factory=list)
    parameters: Optional[List[TypeDecorator]] = None
    hints: Optional[List[Any]] = None


class ConstructorDecorator(JsonModel):
    signature: str
    description: str
    parameter_decorators: List[TypeDecorator] = Field(default_factory=list)


class FunctionDecorator(JsonModel):
    signature: str
    name: str
    description: str
    parameter_decorators: List[TypeDecorator] = Field(default_factory=list)
    return_decorators: List[ReturnTypeDecorator] = Field(default_factory=list)
    emittable_events: List[str] = Field(default_factory=list)
    read_only: bool = False


class EventDecorator(JsonModel):
    signature: str
    name: str
    description: str
    parameter_decorators: List[EventTypeDecorator] = Field(default_factory=list)


class ManifestJson(JsonModel):
    name: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    implements: List[str] = Field(default_factory=list)
    event_decorators: List[EventDecorator] = Field(default_factory=list)
    constructor_decorators: List[ConstructorDecorator] = Field(default_factory=list)
    function_decorators: List[FunctionDecorator] = Field(default_factory=list)

    @field_validator("tags", "implements", mode="before")
    @classmethod
    def dedupe(cls, v):
        return _ordered_unique(v)


class InterfaceManifestJson(JsonModel):
    name: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    event_decorators: List[EventDecorator] = Field(default_factory=list)
    function_decorators: List[FunctionDecorator] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe(cls, v):
        return _ordered_unique(v)


class InterfaceManifestJsonWithId(JsonModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    event_decorators: List[EventDecorator] = Field(default_factory=list)
    function_decorators: List[FunctionDecorator] = Field(default_factory=list)
    matching_event_decorators: List[EventDecorator] = Field(default_factory=list)
    matching_function_decorators: List[FunctionDecorator] = Field(default_factory=list)


AbiInputOutput.model_rebuild()
TypeDecorator.model_rebuild()
ReturnTypeDecorator.model_rebuild()
