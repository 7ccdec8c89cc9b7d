"""Translate engine exceptions into HTTP errors."""
from fastapi import HTTPException

from ..engine import (
    CartClosed,
    CheckoutError,
    MalformedRules,
    NothingToRemove,
    SourceUnreadable,
    UnknownSKU,
)

STATUS_CODES = {
    UnknownSKU: 404,
    NothingToRemove: 409,
    CartClosed: 409,
    MalformedRules: 422,
    SourceUnreadable: 503,
}


def to_http(e: CheckoutError) -> HTTPException:
    for exc_type, status in STATUS_CODES.items():
        if isinstance(e, exc_type):
            return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
