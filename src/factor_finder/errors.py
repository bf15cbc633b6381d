from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    PARSE = "parse"
    DOMAIN = "domain"
    COMPUTATION = "computation"

    def __str__(self):
        return self.value


class FactorFinderError(RuntimeError):
    """Base error for the search engine. Carries a structured kind plus a readable detail."""

    kind: ErrorKind = ErrorKind.COMPUTATION

    def __init__(self, detail: str, *, field: Optional[str] = None):
        self.detail = detail
        self.field = field
        super().__init__(detail)


class ParseError(FactorFinderError):
    kind = ErrorKind.PARSE


class DomainError(FactorFinderError):
    kind = ErrorKind.DOMAIN


class ComputationError(FactorFinderError):
    kind = ErrorKind.COMPUTATION
