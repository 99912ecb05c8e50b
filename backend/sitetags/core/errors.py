"""
Catalog error kinds.

Every failure is synchronous and leaves registries and counters exactly as
they were before the call. Callers branch on the concrete class (or on
``kind`` once an error has crossed the HTTP boundary).
"""
from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for all catalog failures"""

    kind = "CatalogError"

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "type": self.kind,
            "metadata": self.metadata,
        }


class InvalidName(CatalogError):
    """Name is empty or contains the reserved field separator"""

    kind = "InvalidName"


class DuplicateName(CatalogError):
    """Name already present in the registry scope"""

    kind = "DuplicateName"


class NotFound(CatalogError):
    """Site or tag name absent from its scope"""

    kind = "NotFound"


class ArithmeticOverflow(CatalogError):
    """Accumulated weight would exceed the counter bound"""

    kind = "ArithmeticOverflow"


class InvalidAmount(CatalogError):
    """Payment amount or budget is negative or not an integer"""

    kind = "InvalidAmount"


class PaymentSinkError(CatalogError):
    """The payment could not be burned; the endorsement is aborted"""

    kind = "PaymentSinkError"
