"""
Builders for artifact.json and manifest.json test data
"""
from typing import List, Optional

from app.components.contract_json import (AbiInputOutput, AbiObject,
                                          ArtifactJson, ConstructorDecorator,
                                          EventDecorator, EventTypeDecorator,
                                          FunctionDecorator,
                                          InterfaceManifestJson, ManifestJson,
                                          ReturnTypeDecorator, TypeDecorator)


def abi_param(type: str, name: str = "arg1", components: Optional[List[AbiInputOutput]] = None,
              indexed: Optional[bool] = None) -> AbiInputOutput:
    return AbiInputOutput(components=components, internal_type=type, name=name, type=type, indexed=indexed)


def constructor_abi(*arg_types: str, state_mutability: Optional[str] = None) -> AbiObject:
    return AbiObject(
        inputs=[abi_param(t) for t in arg_types],
        outputs=None,
        state_mutability=state_mutability,
        name="",
        type="constructor",
    )


def function_abi(name: str, *arg_types: str, outputs: Optional[List[AbiInputOutput]] = None,
                 state_mutability: Optional[str] = None) -> AbiObject:
    return AbiObject(
        inputs=[abi_param(t) for t in arg_types],
        outputs=outputs if outputs is not None else [],
        state_mutability=state_mutability,
        name=name,
        type="function",
    )


def event_abi(name: str, *inputs: AbiInputOutput) -> AbiObject:
    return AbiObject(anonymous=False, inputs=list(inputs), outputs=[], name=name, type="event")


def artifact(*abi: AbiObject, bytecode: str = "0") -> ArtifactJson:
    return ArtifactJson(
        contract_name="Test",
        source_name="Test.sol",
        abi=list(abi),
        bytecode=bytecode,
        deployed_bytecode=bytecode,
    )


def type_decorator(name: str = "Arg1", parameters: Optional[List[TypeDecorator]] = None) -> TypeDecorator:
    return TypeDecorator(name=name, description=name, recommended_types=[], parameters=parameters)


def constructor_decorator(arg_type: str, description: str) -> ConstructorDecorator:
    return ConstructorDecorator(
        signature=f"constructor({arg_type})",
        description=description,
        parameter_decorators=[type_decorator()],
    )


def function_decorator(name: str, arg_type: str, description: str,
                       return_decorators: Optional[List[ReturnTypeDecorator]] = None,
                       read_only: bool = False) -> FunctionDecorator:
    return FunctionDecorator(
        signature=f"{name}({arg_type})",
        name=description,
        description=description,
        parameter_decorators=[type_decorator()],
        return_decorators=return_decorators or [],
        emittable_events=[],
        read_only=read_only,
    )


def event_decorator(name: str, arg_type: str, description: str, indexed: bool = False) -> EventDecorator:
    return EventDecorator(
        signature=f"{name}({arg_type})",
        name=description,
        description=description,
        parameter_decorators=[EventTypeDecorator(name="Arg1", description="Arg1", indexed=indexed)],
    )


def manifest(implements: Optional[List[str]] = None, tags: Optional[List[str]] = None,
             constructors: Optional[List[ConstructorDecorator]] = None,
             functions: Optional[List[FunctionDecorator]] = None,
             events: Optional[List[EventDecorator]] = None) -> ManifestJson:
    return ManifestJson(
        name="name",
        description="description",
        tags=tags or [],
        implements=implements or [],
        constructor_decorators=constructors or [],
        function_decorators=functions or [],
        event_decorators=events or [],
    )


def interface_manifest(functions: Optional[List[FunctionDecorator]] = None,
                       events: Optional[List[EventDecorator]] = None,
                       tags: Optional[List[str]] = None) -> InterfaceManifestJson:
    return InterfaceManifestJson(
        name="interface",
        description="interface",
        tags=tags or [],
        function_decorators=functions or [],
        event_decorators=events or [],
    )


class DictInterfaces:
    """Interface lookup backed by a dict"""

    def __init__(self, interfaces):
        self.interfaces = interfaces

    def get_by_id(self, interface_id):
        return self.interfaces.get(interface_id)
