"""GATE 2: Tier Presence — слот (token, tier_id) записан

Существование определяется явно (TierLedger.get → Optional[Tier]),
поэтому уровень с supply == 0 существует и проходит этот gate.
"""

from dataclasses import dataclass
from typing import Optional

from tiered_tokens.core.domain.tier import Tier
from tiered_tokens.core.errors import TierMissing, TokenEngineError
from tiered_tokens.gatekeeper.gates.gate_01_ownership import Gate01Result
from tiered_tokens.ledger.tier_ledger import TierLedger


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    allowed: bool
    block_reason: str

    token: str
    tier_id: int
    tier: Optional[Tier]

    details: str

    def to_error(self) -> Optional[TokenEngineError]:
        if self.allowed or self.block_reason != "tier_missing":
            return None
        return TierMissing(self.token, self.tier_id)


class Gate02TierPresence:
    """GATE 2: Tier Presence."""

    def __init__(self, ledger: TierLedger):
        self.ledger = ledger

    def evaluate(self, gate01_result: Gate01Result, tier_id: int) -> Gate02Result:
        """Оценка GATE 2.

        Args:
            gate01_result: результат GATE 1 (должен быть PASS)
            tier_id: идентификатор уровня
        """
        token = gate01_result.token

        if not gate01_result.allowed:
            return Gate02Result(
                allowed=False,
                block_reason=f"gate01_blocked: {gate01_result.block_reason}",
                token=token,
                tier_id=tier_id,
                tier=None,
                details=f"GATE 1 blocked: {gate01_result.details}",
            )

        tier = self.ledger.get(token, tier_id)
        if tier is None:
            return Gate02Result(
                allowed=False,
                block_reason="tier_missing",
                token=token,
                tier_id=tier_id,
                tier=None,
                details=f"tier {tier_id} is not written for {token}",
            )

        return Gate02Result(
            allowed=True,
            block_reason="",
            token=token,
            tier_id=tier_id,
            tier=tier,
            details=f"PASS: tier {tier_id} '{tier.name}' supply={tier.supply} minted={tier.minted}",
        )
