"""
Domain models and value objects.

Contains fundamental domain entities like Tier, identities and audit events.
"""

from tiered_tokens.core.domain.events import (
    Approval,
    EventType,
    TierAdded,
    TokenCreated,
    TokenEvent,
    TokensBurned,
    TokensMinted,
    Transfer,
)
from tiered_tokens.core.domain.identity import (
    ENGINE_IDENTITY_DEFAULT,
    ZERO_ADDRESS,
    derive_token_address,
    require_identity,
)
from tiered_tokens.core.domain.tier import Tier

__all__ = [
    # Identity
    "ZERO_ADDRESS",
    "ENGINE_IDENTITY_DEFAULT",
    "require_identity",
    "derive_token_address",
    # Tier model
    "Tier",
    # Events
    "EventType",
    "TokenEvent",
    "TokenCreated",
    "TierAdded",
    "TokensMinted",
    "TokensBurned",
    "Transfer",
    "Approval",
]
