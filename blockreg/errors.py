from __future__ import annotations


class BlockRegistryError(Exception):
    """Base class for every error raised by the block registry."""


class CapacityExceeded(BlockRegistryError):
    """Raised when the fixed-width family id space is full."""


class UnsupportedOperation(BlockRegistryError):
    """Raised when state is applied to a block kind that declares none."""


class NotAddressable(BlockRegistryError):
    """Raised by a kind encoder for a state combination with no data slot.

    `BlockRegistry.finalize` treats this as "skip the variant"; it never
    escapes the finalize pass.
    """


class InvalidState(BlockRegistryError, ValueError):
    """Raised when a state key or value does not match what a kind declares."""


class DataOffsetError(BlockRegistryError):
    """Raised when a kind encodes an offset outside 0..15 or two variants collide."""


class DeclarationError(BlockRegistryError):
    """Raised when declarative block data cannot be read or validated."""
