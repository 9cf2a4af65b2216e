"""Type definitions for eksop-lib."""

from eksop_lib.types.services import ServiceName

__all__ = [
    "ServiceName",
]
