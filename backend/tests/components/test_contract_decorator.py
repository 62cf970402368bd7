"""
Tests for contract decorator resolution
"""
import pytest

from app.components.abi_types import BasicType, DynamicArrayType, StructType
from app.components.contract_decorator import (ContractDecorator,
                                               abi_signature,
                                               concat_by_priority,
                                               resolve_overrides,
                                               to_output_type_json)
from app.components.contract_json import (AbiObject, EventDecorator,
                                          EventTypeDecorator,
                                          FunctionDecorator,
                                          ReturnTypeDecorator, TypeDecorator)
from app.core.exceptions import (ContractDecoratorError,
                                 ContractInterfaceNotFoundError,
                                 MissingArtifactFieldError,
                                 SignatureNotFoundError)
from factories import (DictInterfaces, abi_param, artifact,
                       constructor_abi, constructor_decorator, event_abi,
                       event_decorator, function_abi, function_decorator,
                       interface_manifest, manifest)

ARTIFACT = artifact(
    constructor_abi("string"),
    constructor_abi("uint"),
    function_abi("fromDecorator", "string"),
    function_abi("fromOverride1", "uint"),
    function_abi("fromOverride2", "int"),
    function_abi("extraFunction", "bool"),
    event_abi("FromDecorator", abi_param("string")),
    event_abi("FromOverride1", abi_param("uint")),
    event_abi("FromOverride2", abi_param("int")),
    event_abi("ExtraEvent", abi_param("bool")),
)

MANIFEST = manifest(
    implements=["override-1", "override-2", "extra"],
    constructors=[constructor_decorator("string", "not-overridden-1")],
    functions=[function_decorator("fromDecorator", "string", "not-overridden-1")],
    events=[event_decorator("FromDecorator", "string", "not-overridden-1")],
)

INTERFACES = DictInterfaces({
    "override-1": interface_manifest(
        functions=[
            function_decorator("fromDecorator", "string", "overridden-1-1"),
            function_decorator("fromOverride1", "uint", "overridden-1-2"),
        ],
        events=[
            event_decorator("FromDecorator", "string", "overridden-1-1"),
            event_decorator("FromOverride1", "uint", "overridden-1-2"),
        ],
        tags=["tag-1"],
    ),
    "override-2": interface_manifest(
        functions=[
            function_decorator("fromDecorator", "string", "overridden-2-1"),
            function_decorator("fromOverride1", "uint", "overridden-2-2"),
            function_decorator("fromOverride2", "int", "overridden-2-3"),
        ],
        events=[
            event_decorator("FromDecorator", "string", "overridden-2-1"),
            event_decorator("FromOverride1", "uint", "overridden-2-2"),
            event_decorator("FromOverride2", "int", "overridden-2-3"),
        ],
        tags=["tag-1", "tag-2"],
    ),
    "extra": interface_manifest(
        functions=[
            function_decorator("fromDecorator", "string", "extra-1"),
            function_decorator("fromOverride1", "uint", "extra-2"),
            function_decorator("fromOverride2", "int", "extra-3"),
            function_decorator("extraFunction", "bool", "extra-4"),
        ],
        events=[
            event_decorator("FromDecorator", "string", "extra-1"),
            event_decorator("FromOverride1", "uint", "extra-2"),
            event_decorator("FromOverride2", "int", "extra-3"),
            event_decorator("ExtraEvent", "bool", "extra-4"),
            event_decorator("MissingEvent", "bool", "extra-5"),
        ],
    ),
})


def _create(artifact_json=ARTIFACT, manifest_json=MANIFEST, imported=False, interfaces=INTERFACES):
    return ContractDecorator.create(
        id="contract-id",
        artifact=artifact_json,
        manifest=manifest_json,
        imported=imported,
        interfaces_provider=interfaces,
    )


def test_manifest_decorators_override_interfaces():
    decorator = _create()

    assert [f.description for f in decorator.functions] == [
        "not-overridden-1", "overridden-1-2", "overridden-2-3", "extra-4"
    ]
    assert [f.solidity_name for f in decorator.functions] == [
        "fromDecorator", "fromOverride1", "fromOverride2", "extraFunction"
    ]
    assert [e.description for e in decorator.events] == [
        "not-overridden-1", "overridden-1-2", "overridden-2-3", "extra-4"
    ]


def test_imported_contract_prefers_interface_decorators():
    decorator = _create(imported=True)

    assert [f.description for f in decorator.functions] == [
        "overridden-1-1", "overridden-1-2", "overridden-2-3", "extra-4"
    ]
    assert [e.description for e in decorator.events] == [
        "overridden-1-1", "overridden-1-2", "overridden-2-3", "extra-4"
    ]


def test_resolved_contract_metadata():
    decorator = _create()

    assert decorator.id == "contract-id"
    assert decorator.name == "name"
    assert decorator.description == "description"
    assert decorator.binary == "0"
    assert decorator.implements == ["override-1", "override-2", "extra"]
    assert decorator.tags == ["tag-1", "tag-2"]
    assert decorator.manifest is MANIFEST
    assert decorator.artifact is ARTIFACT


def test_constructors_come_from_manifest_only():
    decorator = _create()

    assert len(decorator.constructors) == 1
    constructor = decorator.constructors[0]
    assert constructor.description == "not-overridden-1"
    assert constructor.payable is False
    assert len(constructor.inputs) == 1
    param = constructor.inputs[0]
    assert (param.name, param.solidity_name, param.solidity_type) == ("Arg1", "arg1", "string")
    assert param.parameters is None


def test_function_parameters_are_zipped_with_abi_inputs():
    decorator = _create()
    function = decorator.functions[1]

    assert function.signature == "fromOverride1(uint)"
    assert function.inputs[0].solidity_type == "uint"
    assert function.outputs == []
    assert function.read_only is False


def test_unknown_interface_raises():
    with pytest.raises(ContractInterfaceNotFoundError) as exc_info:
        _create(interfaces=DictInterfaces({}))

    assert exc_info.value.message == "Smart contract interface not found for ID: override-1"


def test_interfaces_are_ignored_without_provider():
    decorator = _create(interfaces=None)

    assert [f.description for f in decorator.functions] == ["not-overridden-1"]
    assert decorator.implements == ["override-1", "override-2", "extra"]


def test_function_without_abi_entry_raises():
    manifest_json = manifest(functions=[function_decorator("missing", "address", "missing")])

    with pytest.raises(SignatureNotFoundError) as exc_info:
        _create(manifest_json=manifest_json)

    assert exc_info.value.message == (
        "Contract decorator incompatible: Decorator signature missing(address) not found in artifact.json"
    )
    assert isinstance(exc_info.value, ContractDecoratorError)


def test_constructor_without_abi_entry_raises():
    artifact_json = artifact(function_abi("fromDecorator", "string"))
    manifest_json = manifest(constructors=[constructor_decorator("address", "constructor")])

    with pytest.raises(SignatureNotFoundError):
        _create(artifact_json=artifact_json, manifest_json=manifest_json)


def test_event_without_abi_entry_is_dropped():
    manifest_json = manifest(events=[
        event_decorator("Missing", "address", "missing"),
        event_decorator("ExtraEvent", "bool", "extra"),
    ])

    decorator = _create(manifest_json=manifest_json)

    assert [e.signature for e in decorator.events] == ["ExtraEvent(bool)"]


def test_function_without_outputs_in_artifact_raises():
    abi_object = AbiObject(inputs=[], outputs=None, state_mutability="view", name="f", type="function")
    manifest_json = manifest(functions=[FunctionDecorator(signature="f()", name="F", description="F")])

    with pytest.raises(MissingArtifactFieldError) as exc_info:
        _create(artifact_json=artifact(abi_object), manifest_json=manifest_json)

    assert exc_info.value.message == (
        "Contract decorator incompatible: Function f() is missing outputs in artifact.json"
    )


def test_function_without_name_in_artifact_raises():
    abi_object = AbiObject(inputs=[], outputs=[], name=None, type="function")
    manifest_json = manifest(functions=[FunctionDecorator(signature="None()", name="F", description="F")])

    with pytest.raises(MissingArtifactFieldError, match="missing function name"):
        _create(artifact_json=artifact(abi_object), manifest_json=manifest_json)


def test_event_without_name_in_artifact_raises():
    abi_object = AbiObject(anonymous=False, inputs=[abi_param("bool")], outputs=[], name=None, type="event")
    manifest_json = manifest(events=[event_decorator("None", "bool", "unnamed")])

    with pytest.raises(MissingArtifactFieldError, match="missing event name"):
        _create(artifact_json=artifact(abi_object), manifest_json=manifest_json)


def test_create_is_repeatable():
    assert _create() == _create()
    assert _create(imported=True) == _create(imported=True)


def test_view_function_resolves_read_only_owner_getter():
    abi_object = function_abi("getOwner", outputs=[abi_param("address", name="")], state_mutability="view")
    decorator_json = FunctionDecorator(
        signature="getOwner()",
        name="Get owner",
        description="Contract owner",
        return_decorators=[ReturnTypeDecorator(name="Owner", description="Owner", solidity_type="address")],
        read_only=False,
    )

    decorator = _create(artifact_json=artifact(abi_object), manifest_json=manifest(functions=[decorator_json]))

    (function,) = decorator.functions
    assert function.read_only is True
    assert function.solidity_name == "getOwner"
    assert function.inputs == []
    assert [o.solidity_type for o in function.outputs] == ["address"]


@pytest.mark.parametrize("state_mutability,declared,expected", [
    ("view", False, True),
    ("pure", False, True),
    ("nonpayable", False, False),
    ("payable", False, False),
    ("nonpayable", True, True),
    (None, False, False),
])
def test_read_only_is_declared_or_inferred(state_mutability, declared, expected):
    artifact_json = artifact(function_abi("get", "uint256", state_mutability=state_mutability))
    manifest_json = manifest(functions=[function_decorator("get", "uint256", "get", read_only=declared)])

    decorator = _create(artifact_json=artifact_json, manifest_json=manifest_json)

    assert decorator.functions[0].read_only is expected


@pytest.mark.parametrize("state_mutability,expected", [
    ("payable", True),
    ("nonpayable", False),
    (None, False),
])
def test_constructor_payable_follows_state_mutability(state_mutability, expected):
    artifact_json = artifact(constructor_abi("address", state_mutability=state_mutability))
    manifest_json = manifest(constructors=[constructor_decorator("address", "ctor")])

    decorator = _create(artifact_json=artifact_json, manifest_json=manifest_json)

    assert decorator.constructors[0].payable is expected


def test_tuple_types_are_expanded_in_signatures():
    inner = abi_param("tuple", name="inner", components=[abi_param("bool", name="flag"), abi_param("bytes32[2]", name="data")])
    struct_array = abi_param("tuple[]", name="items", components=[abi_param("address", name="owner"), inner])
    abi_object = function_abi("store", outputs=[])
    abi_object = abi_object.model_copy(update={"inputs": [struct_array, abi_param("uint256", name="count")]})

    assert abi_signature(abi_object) == "store(tuple(address,tuple(bool,bytes32[2]))[],uint256)"


def test_nested_tuple_parameters_are_decorated():
    items = abi_param("tuple[]", name="items", components=[abi_param("address", name="owner"), abi_param("uint256", name="amount")])
    abi_object = function_abi("store").model_copy(update={"inputs": [items]})
    decorator_json = FunctionDecorator(
        signature="store(tuple(address,uint256)[])",
        name="Store",
        description="Store items",
        parameter_decorators=[
            TypeDecorator(
                name="Items",
                description="Items",
                parameters=[
                    TypeDecorator(name="Owner", description="Owner", recommended_types=["address"]),
                    TypeDecorator(name="Amount", description="Amount"),
                ],
            )
        ],
    )

    decorator = _create(artifact_json=artifact(abi_object), manifest_json=manifest(functions=[decorator_json]))

    param = decorator.functions[0].inputs[0]
    assert param.solidity_type == "tuple[]"
    assert [(p.name, p.solidity_name, p.solidity_type) for p in param.parameters] == [
        ("Owner", "owner", "address"),
        ("Amount", "amount", "uint256"),
    ]
    assert param.parameters[0].recommended_types == ["address"]


def test_return_decorators_use_declared_type_and_pad_missing_outputs():
    abi_object = function_abi("balances", "address", outputs=[abi_param("uint256", name="balance")], state_mutability="view")
    decorator_json = function_decorator(
        "balances",
        "address",
        "balances",
        return_decorators=[
            ReturnTypeDecorator(name="Balance", description="Balance", solidity_type="uint128"),
            ReturnTypeDecorator(name="Extra", description="Extra", solidity_type="bool"),
        ],
    )

    decorator = _create(artifact_json=artifact(abi_object), manifest_json=manifest(functions=[decorator_json]))

    outputs = decorator.functions[0].outputs
    assert [(o.name, o.solidity_name, o.solidity_type) for o in outputs] == [
        ("Balance", "balance", "uint128"),
        ("Extra", "", "bool"),
    ]


def test_deserializable_events_split_indexed_and_regular_inputs():
    abi_object = event_abi(
        "Transfer",
        abi_param("address", name="from", indexed=True),
        abi_param("tuple", name="payment", components=[abi_param("uint256", name="amount"), abi_param("string", name="memo")]),
        abi_param("address[]", name="recipients"),
    )
    decorator_json = EventDecorator(
        signature="Transfer(address,tuple(uint256,string),address[])",
        name="Transfer",
        description="Transfer",
        parameter_decorators=[
            EventTypeDecorator(name="From", description="From", indexed=True),
            EventTypeDecorator(
                name="Payment",
                description="Payment",
                parameters=[TypeDecorator(name="Amount", description="Amount"), TypeDecorator(name="Memo", description="Memo")],
            ),
            EventTypeDecorator(name="Recipients", description="Recipients"),
        ],
    )

    decorator = _create(artifact_json=artifact(abi_object), manifest_json=manifest(events=[decorator_json]))
    (event,) = decorator.get_deserializable_events()

    assert event.signature == "Transfer(address,tuple(uint256,string),address[])"
    assert event.inputs_order == ["from", "payment", "recipients"]
    assert [(i.name, i.abi_type) for i in event.indexed_inputs] == [("from", BasicType("address"))]
    assert [(i.name, i.abi_type) for i in event.regular_inputs] == [
        ("payment", StructType([BasicType("uint256"), BasicType("string")])),
        ("recipients", DynamicArrayType(BasicType("address"))),
    ]
    assert [i.position for i in event.indexed_inputs + event.regular_inputs] == [0, 1, 2]


def test_output_type_json():
    assert to_output_type_json("uint256", None) == '"uint256"'
    assert to_output_type_json("tuple[]", []) == '{"type":"tuple[]","elems":[]}'


def test_resolve_overrides_keeps_first_occurrence():
    first = function_decorator("a", "uint256", "first")
    second = function_decorator("a", "uint256", "second")
    other = function_decorator("b", "uint256", "other")

    assert resolve_overrides([first, other, second]) == [first, other]


def test_concat_by_priority():
    manifest_items = [function_decorator("a", "uint256", "manifest")]
    interface_items = [function_decorator("a", "uint256", "interface")]

    assert concat_by_priority(manifest_items, interface_items, imported=False) == manifest_items + interface_items
    assert concat_by_priority(manifest_items, interface_items, imported=True) == interface_items + manifest_items
