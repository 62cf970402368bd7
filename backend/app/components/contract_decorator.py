"""
Contract decorator resolution.

A ContractDecorator ties every ABI entry of artifact.json to its human-authored decorator
from manifest.json or from one of the interfaces the manifest implements. Entries are
joined on the canonical signature `name(type1,type2,...)`, where tuple types are expanded
recursively as `tuple(<types>)<array suffix>`.

Override policy: decorators are de-duplicated by signature and the first occurrence wins.
Manifest decorators come first for regular contracts, interface decorators come first
for imported contracts. Constructors and functions must match an ABI entry; events that
do not match are dropped.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Protocol, Sequence, TypeVar

from app.components.abi_types import AbiType, parse_output_parameter
from app.components.contract_json import (EMPTY_ABI_INPUT_OUTPUT,
                                          AbiInputOutput, AbiObject,
                                          ArtifactJson, EventDecorator,
                                          EventTypeDecorator,
                                          FunctionDecorator,
                                          InterfaceManifestJson, ManifestJson,
                                          ReturnTypeDecorator, TypeDecorator)
from app.core.exceptions import (ContractInterfaceNotFoundError,
                                 MissingArtifactFieldError,
                                 SignatureNotFoundError)

READ_ONLY_STATE_MUTABILITIES = frozenset({"view", "pure"})

T = TypeVar("T", FunctionDecorator, EventDecorator)


class InterfaceLookup(Protocol):
    """Resolves interface manifests by interface id"""

    def get_by_id(self, interface_id: str) -> Optional[InterfaceManifestJson]:
        ...


@dataclass(frozen=True)
class ContractParameter:
    name: str
    description: str
    solidity_name: str
    solidity_type: str
    recommended_types: List[str]
    parameters: Optional[List[ContractParameter]]
    hints: Optional[List[Any]]


@dataclass(frozen=True)
class EventParameter:
    name: str
    description: str
    indexed: bool
    solidity_name: str
    solidity_type: str
    recommended_types: List[str]
    parameters: Optional[List[ContractParameter]]
    hints: Optional[List[Any]]


@dataclass(frozen=True)
class ContractConstructor:
    inputs: List[ContractParameter]
    description: str
    payable: bool


@dataclass(frozen=True)
class ContractFunction:
    name: str
    description: str
    solidity_name: str
    signature: str
    inputs: List[ContractParameter]
    outputs: List[ContractParameter]
    emittable_events: List[str]
    read_only: bool


@dataclass(frozen=True)
class ContractEvent:
    name: str
    description: str
    solidity_name: str
    signature: str
    inputs: List[EventParameter]


@dataclass(frozen=True)
class DeserializableEventInput:
    name: str
    abi_type: AbiType
    # index among all event inputs, indexed and regular alike
    position: int


@dataclass(frozen=True)
class DeserializableEvent:
    signature: str
    inputs_order: List[str]
    indexed_inputs: List[DeserializableEventInput]
    regular_inputs: List[DeserializableEventInput]


@dataclass(frozen=True)
class ContractDecorator:
    id: str
    name: Optional[str]
    description: Optional[str]
    binary: str
    tags: List[str]
    implements: List[str]
    constructors: List[ContractConstructor]
    functions: List[ContractFunction]
    events: List[ContractEvent]
    manifest: ManifestJson
    artifact: ArtifactJson

    @classmethod
    def create(
        cls,
        id: str,
        artifact: ArtifactJson,
        manifest: ManifestJson,
        imported: bool,
        interfaces_provider: Optional[InterfaceLookup],
    ) -> ContractDecorator:
        """
        Resolve a contract decorator from its artifact, manifest and implemented interfaces.

        Raises:
            ContractInterfaceNotFoundError: an implemented interface cannot be resolved
            SignatureNotFoundError: a constructor or function decorator has no ABI entry
            MissingArtifactFieldError: a matched ABI entry lacks its name or outputs
        """
        manifest_interfaces: List[InterfaceManifestJson] = []
        if interfaces_provider is not None:
            for interface_id in manifest.implements:
                interface = interfaces_provider.get_by_id(interface_id)
                if interface is None:
                    raise ContractInterfaceNotFoundError(interface_id)
                manifest_interfaces.append(interface)

        interface_functions = resolve_overrides(
            d for interface in manifest_interfaces for d in interface.function_decorators
        )
        interface_events = resolve_overrides(
            d for interface in manifest_interfaces for d in interface.event_decorators
        )
        tags = list(dict.fromkeys(
            list(manifest.tags) + [tag for interface in manifest_interfaces for tag in interface.tags]
        ))

        return cls(
            id=id,
            name=manifest.name,
            description=manifest.description,
            binary=artifact.bytecode,
            tags=tags,
            implements=list(manifest.implements),
            constructors=_decorate_constructors(artifact, manifest),
            functions=_decorate_functions(artifact, manifest, interface_functions, imported),
            events=_decorate_events(artifact, manifest, interface_events, imported),
            manifest=manifest,
            artifact=artifact,
        )

    def get_deserializable_events(self) -> List[DeserializableEvent]:
        """Build decoding descriptors for every resolved event, split into indexed and regular inputs"""
        result = []
        for event in self.events:
            indexed_inputs = [(i, p) for i, p in enumerate(event.inputs) if p.indexed]
            regular_inputs = [(i, p) for i, p in enumerate(event.inputs) if not p.indexed]
            result.append(
                DeserializableEvent(
                    signature=event.signature,
                    inputs_order=[p.solidity_name for p in event.inputs],
                    indexed_inputs=[_to_deserializable_event_input(p, i) for i, p in indexed_inputs],
                    regular_inputs=[_to_deserializable_event_input(p, i) for i, p in regular_inputs],
                )
            )
        return result


def resolve_overrides(decorators: Iterable[T]) -> List[T]:
    """De-duplicate decorators by signature, keeping the first occurrence"""
    seen = set()
    result = []
    for decorator in decorators:
        if decorator.signature not in seen:
            seen.add(decorator.signature)
            result.append(decorator)
    return result


def concat_by_priority(manifest_items: Sequence[T], interface_items: Sequence[T], imported: bool) -> List[T]:
    if imported:
        return list(interface_items) + list(manifest_items)
    return list(manifest_items) + list(interface_items)


def to_type_list(items: Sequence[AbiInputOutput]) -> str:
    """Comma-separated canonical type list, expanding tuple types recursively"""
    return ",".join(
        _build_tuple_type(item, item.type[len("tuple"):]) if item.type.startswith("tuple") else item.type
        for item in items
    )


def _build_tuple_type(item: AbiInputOutput, array_suffix: str) -> str:
    return f"tuple({to_type_list(item.components or [])}){array_suffix}"


def abi_signature(abi_object: AbiObject) -> str:
    name = "constructor" if abi_object.type == "constructor" else abi_object.name
    return f"{name}({to_type_list(abi_object.inputs or [])})"


def _abi_objects_by_signature(artifact: ArtifactJson, abi_type: str) -> dict:
    # later entries with the same signature replace earlier ones
    return {abi_signature(o): o for o in artifact.abi if o.type == abi_type}


def _get_abi_object_by_signature(abi_objects: dict, signature: str) -> AbiObject:
    abi_object = abi_objects.get(signature)
    if abi_object is None:
        raise SignatureNotFoundError(signature)
    return abi_object


def _decorate_constructors(artifact: ArtifactJson, manifest: ManifestJson) -> List[ContractConstructor]:
    constructors = _abi_objects_by_signature(artifact, "constructor")

    result = []
    for decorator in manifest.constructor_decorators:
        artifact_constructor = _get_abi_object_by_signature(constructors, decorator.signature)
        result.append(
            ContractConstructor(
                inputs=_to_contract_parameters(decorator.parameter_decorators, artifact_constructor.inputs or []),
                description=decorator.description,
                payable=artifact_constructor.state_mutability == "payable",
            )
        )
    return result


def _decorate_functions(
    artifact: ArtifactJson,
    manifest: ManifestJson,
    interface_functions: List[FunctionDecorator],
    imported: bool,
) -> List[ContractFunction]:
    functions = _abi_objects_by_signature(artifact, "function")
    decorators = resolve_overrides(
        concat_by_priority(manifest.function_decorators, interface_functions, imported)
    )

    result = []
    for decorator in decorators:
        artifact_function = _get_abi_object_by_signature(functions, decorator.signature)

        if artifact_function.name is None:
            raise MissingArtifactFieldError(
                f"Function {decorator.signature} is missing function name in artifact.json"
            )
        if artifact_function.outputs is None:
            raise MissingArtifactFieldError(
                f"Function {decorator.signature} is missing outputs in artifact.json"
            )

        result.append(
            ContractFunction(
                name=decorator.name,
                description=decorator.description,
                solidity_name=artifact_function.name,
                signature=decorator.signature,
                inputs=_to_contract_parameters(decorator.parameter_decorators, artifact_function.inputs or []),
                outputs=_return_type_to_contract_parameters(decorator.return_decorators, artifact_function.outputs),
                emittable_events=list(decorator.emittable_events),
                read_only=decorator.read_only
                or artifact_function.state_mutability in READ_ONLY_STATE_MUTABILITIES,
            )
        )
    return result


def _decorate_events(
    artifact: ArtifactJson,
    manifest: ManifestJson,
    interface_events: List[EventDecorator],
    imported: bool,
) -> List[ContractEvent]:
    events = _abi_objects_by_signature(artifact, "event")
    decorators = resolve_overrides(
        concat_by_priority(manifest.event_decorators, interface_events, imported)
    )

    result = []
    for decorator in decorators:
        artifact_event = events.get(decorator.signature)
        if artifact_event is None:
            continue

        if artifact_event.name is None:
            raise MissingArtifactFieldError(
                f"Event {decorator.signature} is missing event name in artifact.json"
            )

        result.append(
            ContractEvent(
                name=decorator.name,
                description=decorator.description,
                solidity_name=artifact_event.name,
                signature=decorator.signature,
                inputs=_event_type_to_contract_parameters(decorator.parameter_decorators, artifact_event.inputs or []),
            )
        )
    return result


def _to_contract_parameters(
    decorators: Sequence[TypeDecorator],
    abi: Sequence[AbiInputOutput],
) -> List[ContractParameter]:
    return [
        ContractParameter(
            name=decorator.name,
            description=decorator.description,
            solidity_name=abi_item.name,
            solidity_type=abi_item.type,
            recommended_types=list(decorator.recommended_types),
            parameters=_to_contract_parameters(decorator.parameters, abi_item.components or [])
            if decorator.parameters is not None else None,
            hints=decorator.hints,
        )
        for decorator, abi_item in zip(decorators, abi)
    ]


def _event_type_to_contract_parameters(
    decorators: Sequence[EventTypeDecorator],
    abi: Sequence[AbiInputOutput],
) -> List[EventParameter]:
    return [
        EventParameter(
            name=decorator.name,
            description=decorator.description,
            indexed=decorator.indexed,
            solidity_name=abi_item.name,
            solidity_type=abi_item.type,
            recommended_types=list(decorator.recommended_types),
            parameters=_to_contract_parameters(decorator.parameters, abi_item.components or [])
            if decorator.parameters is not None else None,
            hints=decorator.hints,
        )
        for decorator, abi_item in zip(decorators, abi)
    ]


def _return_type_to_contract_parameters(
    decorators: Sequence[ReturnTypeDecorator],
    abi: Sequence[AbiInputOutput],
) -> List[ContractParameter]:
    # Return decorators declare their own solidity type; missing ABI outputs are padded
    result = []
    for index, decorator in enumerate(decorators):
        abi_item = abi[index] if index < len(abi) else EMPTY_ABI_INPUT_OUTPUT
        result.append(
            ContractParameter(
                name=decorator.name,
                description=decorator.description,
                solidity_name=abi_item.name,
                solidity_type=decorator.solidity_type,
                recommended_types=list(decorator.recommended_types),
                parameters=_return_type_to_contract_parameters(decorator.parameters, abi_item.components or [])
                if decorator.parameters is not None else None,
                hints=decorator.hints,
            )
        )
    return result


def to_output_type_json(solidity_type: str, parameters: Optional[List[ContractParameter]]) -> str:
    """
    Render a solidity type as an output parameter descriptor.

    Tuple types become `{"type":"tuple...","elems":[...]}` with nested parameter types
    rendered the same way; every other type is a quoted string.
    """
    if solidity_type.startswith("tuple"):
        elems = ",".join(to_output_type_json(p.solidity_type, p.parameters) for p in parameters or [])
        return f'{{"type":"{solidity_type}","elems":[{elems}]}}'
    return f'"{solidity_type}"'


def _to_deserializable_event_input(parameter: EventParameter, position: int) -> DeserializableEventInput:
    type_json = to_output_type_json(parameter.solidity_type, parameter.parameters)
    return DeserializableEventInput(
        name=parameter.solidity_name,
        abi_type=parse_output_parameter(json.loads(type_json)),
        position=position,
    )
