"""
API routes for deployable contract decorators (file-based and imported)
"""
from typing import List, Optional
from uuid import UUID

from app.api.schemas import (ArtifactJsonsResponse,
                             ContractDecoratorResponse,
                             ContractDecoratorsResponse,
                             InfoMarkdownsResponse, ManifestJsonsResponse)
from app.components.contract_json import ArtifactJson, ManifestJson
from app.core.database import get_db
from app.core.exceptions import ResourceNotFoundError
from app.services.contract_decorator_registry import (
    ContractDecoratorFilters, ContractDecoratorRegistry,
    get_contract_decorator_registry)
from app.services.contract_interface_registry import (
    ContractInterfaceRegistry, get_contract_interface_registry)
from app.services.imported_contract_decorator_service import \
    ImportedContractDecoratorService
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

router = APIRouter(prefix="/v1/deployable-contracts", tags=["deployable-contracts"])

MARKDOWN_MEDIA_TYPE = "text/markdown"


def get_filters(
    tags: Optional[List[str]] = Query(None, description="Tag filters, values are OR-ed, 'AND' joins required tags"),
    implements: Optional[List[str]] = Query(None, description="Interface filters, same syntax as tags"),
) -> ContractDecoratorFilters:
    return ContractDecoratorFilters.from_query(tags=tags, implements=implements)


def get_imported_service(
    db: Session = Depends(get_db),
    interfaces: ContractInterfaceRegistry = Depends(get_contract_interface_registry),
) -> ImportedContractDecoratorService:
    return ImportedContractDecoratorService(db, interfaces)


@router.get("", response_model=ContractDecoratorsResponse)
async def list_contract_decorators(
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    filters: ContractDecoratorFilters = Depends(get_filters),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    """List file-based contract decorators, followed by imported ones of the project"""
    decorators = registry.get_all(filters)
    if project_id is not None:
        decorators = decorators + imported.get_all(project_id, filters)
    return ContractDecoratorsResponse(
        deployable_contracts=[ContractDecoratorResponse.model_validate(d) for d in decorators]
    )


@router.get("/manifest.json", response_model=ManifestJsonsResponse)
async def list_manifest_json_files(
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    filters: ContractDecoratorFilters = Depends(get_filters),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    manifests = registry.get_all_manifest_json_files(filters)
    if project_id is not None:
        manifests = manifests + imported.get_all_manifest_json_files(project_id, filters)
    return ManifestJsonsResponse(manifests=manifests)


@router.get("/artifact.json", response_model=ArtifactJsonsResponse)
async def list_artifact_json_files(
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    filters: ContractDecoratorFilters = Depends(get_filters),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    artifacts = registry.get_all_artifact_json_files(filters)
    if project_id is not None:
        artifacts = artifacts + imported.get_all_artifact_json_files(project_id, filters)
    return ArtifactJsonsResponse(artifacts=artifacts)


@router.get("/info.md", response_model=InfoMarkdownsResponse)
async def list_info_markdown_files(
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    filters: ContractDecoratorFilters = Depends(get_filters),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    info_markdowns = registry.get_all_info_markdown_files(filters)
    if project_id is not None:
        info_markdowns = info_markdowns + imported.get_all_info_markdown_files(project_id, filters)
    return InfoMarkdownsResponse(info_markdowns=info_markdowns)


@router.get("/{contract_id:path}/manifest.json", response_model=ManifestJson)
async def get_manifest_json(
    contract_id: str,
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    manifest = registry.get_manifest_json_by_id(contract_id)
    if manifest is None and project_id is not None:
        manifest = imported.get_manifest_json_by_contract_id_and_project_id(contract_id, project_id)
    if manifest is None:
        raise ResourceNotFoundError(f"Contract manifest.json not found for contract ID: {contract_id}")
    return manifest


@router.get("/{contract_id:path}/artifact.json", response_model=ArtifactJson)
async def get_artifact_json(
    contract_id: str,
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    artifact = registry.get_artifact_json_by_id(contract_id)
    if artifact is None and project_id is not None:
        artifact = imported.get_artifact_json_by_contract_id_and_project_id(contract_id, project_id)
    if artifact is None:
        raise ResourceNotFoundError(f"Contract artifact.json not found for contract ID: {contract_id}")
    return artifact


@router.get("/{contract_id:path}/info.md", response_class=PlainTextResponse)
async def get_info_markdown(
    contract_id: str,
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    info_markdown = registry.get_info_markdown_by_id(contract_id)
    if info_markdown is None and project_id is not None:
        info_markdown = imported.get_info_markdown_by_contract_id_and_project_id(contract_id, project_id)
    if info_markdown is None:
        raise ResourceNotFoundError(f"Contract info.md not found for contract ID: {contract_id}")
    return PlainTextResponse(info_markdown, media_type=MARKDOWN_MEDIA_TYPE)


@router.get("/{contract_id:path}", response_model=ContractDecoratorResponse)
async def get_contract_decorator(
    contract_id: str,
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    registry: ContractDecoratorRegistry = Depends(get_contract_decorator_registry),
    imported: ImportedContractDecoratorService = Depends(get_imported_service),
):
    """Get a contract decorator by contract ID, falling back to the project's imported contracts"""
    decorator = registry.get_by_id(contract_id)
    if decorator is None and project_id is not None:
        decorator = imported.get_by_contract_id_and_project_id(contract_id, project_id)
    if decorator is None:
        raise ResourceNotFoundError(f"Contract decorator not found for contract ID: {contract_id}")
    return ContractDecoratorResponse.model_validate(decorator)
