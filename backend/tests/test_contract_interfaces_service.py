"""
Tests for ContractInterfacesService
"""
from uuid import uuid4

import pytest

from app.components.contract_decorator import ContractDecorator
from app.core.exceptions import (ContractInterfaceNotFoundError,
                                 ResourceNotFoundError,
                                 SignatureNotFoundError)
from app.services.contract_interface_registry import ContractInterfaceRegistry
from app.services.contract_interfaces_service import (
    ContractInterfacesService, is_imported_interface)
from factories import (artifact, function_abi, function_decorator,
                       interface_manifest, manifest)

ARTIFACT = artifact(
    function_abi("transfer", "address"),
    function_abi("approve", "address"),
    function_abi("owner"),
)

MANIFEST = manifest(functions=[
    function_decorator("transfer", "address", "transfer"),
    function_decorator("approve", "address", "approve"),
    function_decorator("owner", "", "owner"),
])


def _store_interfaces(registry: ContractInterfaceRegistry, with_partial: bool = True):
    registry.store("erc20", interface_manifest(functions=[
        function_decorator("transfer", "address", "erc20-transfer"),
        function_decorator("approve", "address", "erc20-approve"),
    ]))
    registry.store("ownable", interface_manifest(functions=[function_decorator("owner", "", "ownable-owner")]))
    if with_partial:
        registry.store("partial", interface_manifest(functions=[
            function_decorator("transfer", "address", "partial-transfer"),
            function_decorator("mint", "uint256", "partial-mint"),
        ]))
    registry.store("imported.custom", interface_manifest(functions=[
        function_decorator("transfer", "address", "custom-transfer"),
    ]))
    registry.store("unrelated", interface_manifest(functions=[function_decorator("burn", "uint256", "burn")]))


@pytest.fixture
def project_id():
    return uuid4()


@pytest.fixture
def service(db, interface_registry, project_id):
    _store_interfaces(interface_registry)
    service = ContractInterfacesService(db, interface_registry)
    service.imported_decorators.store(project_id, "imported-token", MANIFEST, ARTIFACT, "")
    return service


def _implements(service, project_id):
    return service.imported_decorators.get_manifest_json_by_contract_id_and_project_id(
        "imported-token", project_id
    ).implements


def test_is_imported_interface():
    assert is_imported_interface("imported.custom")
    assert not is_imported_interface("erc20")


def test_suggested_interfaces(service, project_id):
    result = service.get_suggested_interfaces("imported-token", project_id)

    assert [m.id for m in result.manifests] == ["erc20", "ownable", "partial", "imported.custom"]
    assert result.best_matching_interfaces == ["erc20", "ownable"]
    assert [d.signature for d in result.manifests[2].matching_function_decorators] == ["transfer(address)"]


def test_suggested_interfaces_exclude_implemented(service, project_id):
    service.set_imported_contract_interfaces("imported-token", project_id, ["erc20"])

    result = service.get_suggested_interfaces("imported-token", project_id)

    assert [m.id for m in result.manifests] == ["ownable", "partial", "imported.custom"]
    assert result.best_matching_interfaces == ["ownable", "partial"]


def test_suggested_interfaces_for_unknown_contract(service, project_id):
    with pytest.raises(ResourceNotFoundError):
        service.get_suggested_interfaces("imported-token", uuid4())


def test_add_interfaces(service, project_id):
    service.add_interfaces_to_imported_contract("imported-token", project_id, ["ownable"])
    service.add_interfaces_to_imported_contract("imported-token", project_id, ["erc20", "ownable"])

    assert _implements(service, project_id) == ["ownable", "erc20"]
    decorator = service.imported_decorators.get_by_contract_id_and_project_id("imported-token", project_id)
    assert [f.description for f in decorator.functions] == ["ownable-owner", "erc20-transfer", "erc20-approve"]


def test_remove_interfaces(service, project_id):
    service.set_imported_contract_interfaces("imported-token", project_id, ["erc20", "ownable"])

    service.remove_interfaces_from_imported_contract("imported-token", project_id, ["erc20", "missing"])

    assert _implements(service, project_id) == ["ownable"]


def test_set_interfaces(service, project_id):
    service.set_imported_contract_interfaces("imported-token", project_id, ["ownable", "ownable"])
    assert _implements(service, project_id) == ["ownable"]

    service.set_imported_contract_interfaces("imported-token", project_id, [])
    assert _implements(service, project_id) == []


def test_unknown_interface_is_rejected(service, project_id):
    with pytest.raises(ContractInterfaceNotFoundError):
        service.add_interfaces_to_imported_contract("imported-token", project_id, ["missing"])

    assert _implements(service, project_id) == []


def test_incompatible_interface_is_rejected(service, project_id):
    with pytest.raises(SignatureNotFoundError):
        service.add_interfaces_to_imported_contract("imported-token", project_id, ["partial"])

    assert _implements(service, project_id) == []


def test_updating_unknown_contract_raises(service):
    with pytest.raises(ResourceNotFoundError):
        service.set_imported_contract_interfaces("missing", uuid4(), ["erc20"])


def test_attach_matching_interfaces_to_decorator(db):
    registry = ContractInterfaceRegistry()
    _store_interfaces(registry, with_partial=False)
    service = ContractInterfacesService(db, registry)
    decorator = ContractDecorator.create(
        id="imported-token",
        artifact=ARTIFACT,
        manifest=MANIFEST,
        imported=True,
        interfaces_provider=registry,
    )

    result = service.attach_matching_interfaces_to_decorator(decorator)

    assert result.implements == ["erc20", "ownable", "imported.custom"]
    assert result.manifest.implements == ["erc20", "ownable", "imported.custom"]
    assert [f.description for f in result.functions] == ["erc20-transfer", "erc20-approve", "ownable-owner"]
