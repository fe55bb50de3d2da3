from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = 'NOT_FOUND'
    INVALID_STATE = 'INVALID_STATE'
    INSUFFICIENT_RESOURCE = 'INSUFFICIENT_RESOURCE'
    CONFLICT = 'CONFLICT'
    UPSTREAM = 'UPSTREAM'
    FORBIDDEN = 'FORBIDDEN'
    UNAUTHORIZED = 'UNAUTHORIZED'


class ServiceError(Exception):
    """
    Domain failure surfaced to the caller.

    Services raise it from inside a unit of work so the transaction is rolled
    back; the transport layer maps ``kind`` to its own status codes.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f'ServiceError({self.kind.value}, {self.message!r})'


def not_found(message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def invalid_state(message: str) -> ServiceError:
    return ServiceError(ErrorKind.INVALID_STATE, message)


def insufficient(message: str) -> ServiceError:
    return ServiceError(ErrorKind.INSUFFICIENT_RESOURCE, message)


def forbidden(message: str) -> ServiceError:
    return ServiceError(ErrorKind.FORBIDDEN, message)


def unauthorized(message: str) -> ServiceError:
    return ServiceError(ErrorKind.UNAUTHORIZED, message)
