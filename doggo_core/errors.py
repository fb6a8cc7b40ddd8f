"""
doggo_core.errors
-----------------
Error taxonomy shared by the facade, the request contract and every backend.

Callers discriminate by type, never by message:

- InvalidAdapterError: the adapter object is missing capabilities (construction)
- RequestShapeError:   a request violates the contract (before any backend work)
- InvalidKeyError:     key material does not parse for the declared type
- TooManyKeysError:    an encryption target matched more than one identity
- KeyNotFoundError:    a target or fingerprint matched nothing
- BackendError:        a shipped backend failed for reasons outside the contract
"""

from __future__ import annotations
from typing import Optional, Sequence


class DoggoError(Exception):
    pass


class InvalidAdapterError(DoggoError, TypeError):
    def __init__(self, message: str, missing: Sequence[str] = ()):
        super().__init__(message)
        self.missing = tuple(missing)


class RequestShapeError(DoggoError, ValueError):
    def __init__(self, operation: str, field: Optional[str], message: str):
        self.operation = operation
        self.field = field
        where = f"{operation}.{field}" if field else operation
        super().__init__(f"Bad request for {where}: {message}")


class ResponseShapeError(DoggoError):
    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Bad response from {operation}: {message}")


class InvalidKeyError(DoggoError):
    pass


class TooManyKeysError(DoggoError):
    def __init__(self, target: str, fingerprints: Sequence[str]):
        self.target = target
        self.fingerprints = tuple(fingerprints)
        super().__init__(
            f'"{target}" matched {len(self.fingerprints)} keys: {", ".join(self.fingerprints)}'
        )


class KeyNotFoundError(DoggoError, LookupError):
    def __init__(self, query: str):
        self.query = query
        super().__init__(f'No key found for "{query}"')


class BackendError(DoggoError):
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
