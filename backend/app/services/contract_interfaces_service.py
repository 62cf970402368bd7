"""
Contract Interfaces Service - interface suggestions and interface management for imported contracts
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Set
from uuid import UUID

from app.components.contract_decorator import ContractDecorator
from app.components.contract_json import (InterfaceManifestJsonWithId,
                                          ManifestJson)
from app.core.exceptions import ResourceNotFoundError
from app.core.logging_config import LoggingConfig
from app.services.contract_interface_registry import ContractInterfaceRegistry
from app.services.imported_contract_decorator_service import (
    ImportedContractDecoratorService, resolve_imported_decorator)
from sqlalchemy.orm import Session

logger = LoggingConfig.get_logger(__name__)

IMPORTED_INTERFACE_PREFIX = "imported."


@dataclass(frozen=True)
class MatchingContractInterfaces:
    manifests: List[InterfaceManifestJsonWithId]
    best_matching_interfaces: List[str]


@dataclass(frozen=True)
class _WithNumOfMatches:
    manifest: InterfaceManifestJsonWithId
    num_matches: int


def is_imported_interface(interface_id: str) -> bool:
    return interface_id.startswith(IMPORTED_INTERFACE_PREFIX)


class ContractInterfacesService:
    """Service for matching contract interfaces against contracts and editing imported contract interfaces"""

    def __init__(self, db: Session, interfaces: ContractInterfaceRegistry):
        self.db = db
        self.interfaces = interfaces
        self.imported_decorators = ImportedContractDecoratorService(db, interfaces)

    def attach_matching_interfaces_to_decorator(self, decorator: ContractDecorator) -> ContractDecorator:
        """
        Add every interface whose functions partially match the decorator to its `implements`
        and resolve the decorator again as an imported one.
        """
        matching = self.interfaces.get_all_with_partially_matching_interfaces(
            function_signatures={f.signature for f in decorator.functions},
            event_signatures={e.signature for e in decorator.events},
        )
        new_interfaces = [
            m.id for m in matching
            if m.id not in decorator.implements and m.matching_function_decorators
        ]

        implements = list(dict.fromkeys(list(decorator.manifest.implements) + new_interfaces))
        logger.debug(
            f"Attaching matching interfaces to contract decorator {decorator.id}",
            extra={"interfaces": new_interfaces}
        )

        return resolve_imported_decorator(
            decorator.id,
            decorator.artifact,
            decorator.manifest.model_copy(update={"implements": implements}),
            self.interfaces,
        )

    def get_suggested_interfaces(self, contract_id: str, project_id: UUID) -> MatchingContractInterfaces:
        """
        Suggest interfaces for an imported contract

        Returns:
            All partially matching interfaces not yet implemented (non-imported interfaces first,
            most matches first) and the ids of the best matching interfaces, whose function
            signatures do not overlap.

        Raises:
            ResourceNotFoundError: contract is not imported into the project
        """
        logger.debug(f"Fetching suggested interfaces for contract: {contract_id}, project: {project_id}")

        manifest = self._get_imported_manifest(contract_id, project_id)
        function_signatures = {d.signature for d in manifest.function_decorators}

        matching = self.interfaces.get_all_with_partially_matching_interfaces(
            function_signatures=function_signatures,
            event_signatures={d.signature for d in manifest.event_decorators},
        )
        with_matches = [
            _WithNumOfMatches(m, len(m.matching_function_decorators) + len(m.matching_event_decorators))
            for m in matching
        ]

        return _find_best_matching_interfaces(with_matches, manifest, function_signatures)

    def add_interfaces_to_imported_contract(self, contract_id: str, project_id: UUID, interfaces: List[str]):
        logger.info(
            "Add interfaces to imported contract decorator",
            extra={"contract_id": contract_id, "project_id": str(project_id), "interfaces": interfaces}
        )
        self._update_interfaces(contract_id, project_id, lambda current: current + interfaces)

    def remove_interfaces_from_imported_contract(self, contract_id: str, project_id: UUID, interfaces: List[str]):
        logger.info(
            "Remove interfaces from imported contract decorator",
            extra={"contract_id": contract_id, "project_id": str(project_id), "interfaces": interfaces}
        )
        removed = set(interfaces)
        self._update_interfaces(contract_id, project_id, lambda current: [i for i in current if i not in removed])

    def set_imported_contract_interfaces(self, contract_id: str, project_id: UUID, interfaces: List[str]):
        logger.info(
            "Set imported contract decorator interfaces",
            extra={"contract_id": contract_id, "project_id": str(project_id), "interfaces": interfaces}
        )
        self._update_interfaces(contract_id, project_id, lambda current: list(interfaces))

    def _get_imported_manifest(self, contract_id: str, project_id: UUID) -> ManifestJson:
        manifest = self.imported_decorators.get_manifest_json_by_contract_id_and_project_id(contract_id, project_id)
        if manifest is None:
            raise ResourceNotFoundError(
                f"Imported contract decorator not found for contract ID: {contract_id} and project ID: {project_id}"
            )
        return manifest

    def _update_interfaces(
        self,
        contract_id: str,
        project_id: UUID,
        interfaces_provider: Callable[[List[str]], List[str]],
    ):
        manifest = self._get_imported_manifest(contract_id, project_id)
        artifact = self.imported_decorators.get_artifact_json_by_contract_id_and_project_id(contract_id, project_id)

        new_interfaces = list(dict.fromkeys(interfaces_provider(list(manifest.implements))))
        new_manifest = manifest.model_copy(update={"implements": new_interfaces})

        # fails when the new interface set does not fit the contract
        resolve_imported_decorator(contract_id, artifact, new_manifest, self.interfaces)

        self.imported_decorators.update_interfaces(
            contract_id=contract_id,
            project_id=project_id,
            interfaces=new_interfaces,
            manifest=new_manifest,
        )


def _find_best_matching_interfaces(
    interfaces: List[_WithNumOfMatches],
    manifest: ManifestJson,
    function_signatures: Set[str],
) -> MatchingContractInterfaces:
    non_imported = [i for i in interfaces if not is_imported_interface(i.manifest.id)]
    imported = [i for i in interfaces if is_imported_interface(i.manifest.id)]

    by_priority = [
        i for i in sorted(non_imported, key=lambda i: i.num_matches, reverse=True)
        + sorted(imported, key=lambda i: i.num_matches, reverse=True)
        if i.manifest.id not in manifest.implements
    ]

    return MatchingContractInterfaces(
        manifests=[i.manifest for i in by_priority],
        best_matching_interfaces=_take_without_overlaps(
            [i for i in by_priority if i.num_matches > 0],
            function_signatures,
        ),
    )


def _take_without_overlaps(interfaces: List[_WithNumOfMatches], function_signatures: Set[str]) -> List[str]:
    remaining = set(function_signatures)
    result = []
    for interface in interfaces:
        signatures = {d.signature for d in interface.manifest.matching_function_decorators}
        if signatures <= remaining:
            result.append(interface.manifest.id)
            remaining -= signatures
    return result
