"""
Response and request models shared by the API routes
"""
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.components.contract_json import (ArtifactJson,
                                          InterfaceManifestJsonWithId,
                                          ManifestJson)


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ContractParameterResponse(CamelModel):
    name: str
    description: str
    solidity_name: str
    solidity_type: str
    recommended_types: List[str]
    parameters: Optional[List["ContractParameterResponse"]] = None
    hints: Optional[List[Any]] = None


class EventParameterResponse(CamelModel):
    name: str
    description: str
    indexed: bool
    solidity_name: str
    solidity_type: str
    recommended_types: List[str]
    parameters: Optional[List[ContractParameterResponse]] = None
    hints: Optional[List[Any]] = None


class ContractConstructorResponse(CamelModel):
    inputs: List[ContractParameterResponse]
    description: str
    payable: bool


class ContractFunctionResponse(CamelModel):
    name: str
    description: str
    solidity_name: str
    signature: str
    inputs: List[ContractParameterResponse]
    outputs: List[ContractParameterResponse]
    emittable_events: List[str]
    read_only: bool


class ContractEventResponse(CamelModel):
    name: str
    description: str
    solidity_name: str
    signature: str
    inputs: List[EventParameterResponse]


class ContractDecoratorResponse(CamelModel):
    """Resolved contract decorator"""
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    binary: str
    tags: List[str]
    implements: List[str]
    constructors: List[ContractConstructorResponse]
    functions: List[ContractFunctionResponse]
    events: List[ContractEventResponse]


class ContractDecoratorsResponse(CamelModel):
    deployable_contracts: List[ContractDecoratorResponse]


class ManifestJsonsResponse(CamelModel):
    manifests: List[ManifestJson]


class ArtifactJsonsResponse(CamelModel):
    artifacts: List[ArtifactJson]


class InfoMarkdownsResponse(CamelModel):
    info_markdowns: List[str]


class ContractInterfaceManifestsResponse(CamelModel):
    manifests: List[InterfaceManifestJsonWithId]


class SuggestedContractInterfacesResponse(CamelModel):
    manifests: List[InterfaceManifestJsonWithId]
    best_matching_interfaces: List[str]


class ImportedContractInterfacesRequest(CamelModel):
    interfaces: List[str] = Field(..., description="Contract interface IDs")


class ImportContractRequest(CamelModel):
    """Request model for storing an imported contract decorator"""
    project_id: UUID
    contract_id: str = Field(..., min_length=1, max_length=255)
    manifest_json: ManifestJson
    artifact_json: ArtifactJson
    info_markdown: str = ""
    attach_matching_interfaces: bool = Field(
        default=False,
        description="Add every interface whose functions match the contract to its manifest"
    )


ContractParameterResponse.model_rebuild()
