"""
Service exceptions

Every exception carries an error code and the HTTP status it maps to at the API boundary.
"""
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes returned to API clients"""
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
    CONTRACT_DECORATOR_INCOMPATIBLE = "CONTRACT_DECORATOR_INCOMPATIBLE"
    CONTRACT_INTERFACE_NOT_FOUND = "CONTRACT_INTERFACE_NOT_FOUND"
    ABI_TYPE_PARSE_ERROR = "ABI_TYPE_PARSE_ERROR"
    BLOCKCHAIN_EVENT_READ_ERROR = "BLOCKCHAIN_EVENT_READ_ERROR"


class ServiceError(Exception):
    """Base class for errors surfaced to API clients"""

    error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND
    http_status: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(ServiceError):
    error_code = ErrorCode.RESOURCE_NOT_FOUND
    http_status = 404


class ResourceAlreadyExistsError(ServiceError):
    error_code = ErrorCode.RESOURCE_ALREADY_EXISTS
    http_status = 409


class ContractInterfaceNotFoundError(ServiceError):
    """A manifest implements an interface id that has no interface manifest"""

    error_code = ErrorCode.CONTRACT_INTERFACE_NOT_FOUND

    def __init__(self, interface_id: str):
        super().__init__(f"Smart contract interface not found for ID: {interface_id}")
        self.interface_id = interface_id


class ContractDecoratorError(ServiceError):
    """Decorator data cannot be reconciled with artifact.json"""

    error_code = ErrorCode.CONTRACT_DECORATOR_INCOMPATIBLE

    def __init__(self, reason: str):
        super().__init__(f"Contract decorator incompatible: {reason}")
        self.reason = reason


class SignatureNotFoundError(ContractDecoratorError):

    def __init__(self, signature: str):
        super().__init__(f"Decorator signature {signature} not found in artifact.json")
        self.signature = signature


class MissingArtifactFieldError(ContractDecoratorError):
    pass


class AbiTypeParseError(ServiceError):
    error_code = ErrorCode.ABI_TYPE_PARSE_ERROR


class EventDecodingError(ServiceError):
    error_code = ErrorCode.BLOCKCHAIN_EVENT_READ_ERROR
