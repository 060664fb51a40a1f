"""
Workproof Content Addressing

Opaque content-identifier producers used at proof issuance.
"""

from workproof.content.client import (
    ContentAddressingClient,
    ContentStoreError,
    PinataContentClient,
)

__all__ = [
    "ContentAddressingClient",
    "ContentStoreError",
    "PinataContentClient",
]
