"""
Server-side state management.

The charge box registry is supplied by the embedding central system; until
one is set, an empty in-memory registry answers the read endpoints.
"""

from centralsystem import ChargeBoxRegistry, InMemoryChargeBoxRegistry


# =============================================================================
# Charge Box Registry
# =============================================================================

_registry: ChargeBoxRegistry = InMemoryChargeBoxRegistry()


def set_charge_box_registry(registry: ChargeBoxRegistry) -> None:
    """Set the registry the read endpoints query."""
    global _registry
    _registry = registry


def get_charge_box_registry() -> ChargeBoxRegistry:
    """Get the current charge box registry."""
    return _registry
