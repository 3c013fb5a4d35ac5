"""GATE 3: Supply Ceiling — minted + amount <= supply

Сравнение ведётся через остаток (supply - minted), поэтому сумма
minted + amount не вычисляется и не может переполниться на этом шаге.
"""

from dataclasses import dataclass
from typing import Optional

from tiered_tokens.core.errors import SupplyExceeded, TokenEngineError
from tiered_tokens.core.math.checked_uint import UINT_BITS_DEFAULT, require_uint
from tiered_tokens.gatekeeper.gates.gate_02_tier_presence import Gate02Result


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    allowed: bool
    block_reason: str

    token: str
    tier_id: int
    amount: int
    minted: int
    supply: int
    remaining: int

    details: str

    def to_error(self) -> Optional[TokenEngineError]:
        if self.allowed or self.block_reason != "supply_exceeded":
            return None
        return SupplyExceeded(self.token, self.tier_id, self.minted, self.amount, self.supply)


class Gate03SupplyCeiling:
    """GATE 3: Supply Ceiling (лимит пожизненной эмиссии уровня)."""

    def __init__(self, bits: int = UINT_BITS_DEFAULT):
        self.bits = bits

    def evaluate(self, gate02_result: Gate02Result, amount: int) -> Gate03Result:
        """Оценка GATE 3.

        Args:
            gate02_result: результат GATE 2 (должен быть PASS)
            amount: запрошенное количество

        Raises:
            TypeError / ArithmeticOverflow: Если amount вне [0, 2**bits - 1]
        """
        require_uint(amount, "amount", self.bits)
        tier = gate02_result.tier

        if not gate02_result.allowed or tier is None:
            return Gate03Result(
                allowed=False,
                block_reason=f"gate02_blocked: {gate02_result.block_reason}",
                token=gate02_result.token,
                tier_id=gate02_result.tier_id,
                amount=amount,
                minted=0,
                supply=0,
                remaining=0,
                details=f"GATE 2 blocked: {gate02_result.details}",
            )

        remaining = tier.remaining()
        if amount > remaining:
            return Gate03Result(
                allowed=False,
                block_reason="supply_exceeded",
                token=tier.token,
                tier_id=tier.tier_id,
                amount=amount,
                minted=tier.minted,
                supply=tier.supply,
                remaining=remaining,
                details=f"amount {amount} > remaining {remaining} (minted={tier.minted}, supply={tier.supply})",
            )

        return Gate03Result(
            allowed=True,
            block_reason="",
            token=tier.token,
            tier_id=tier.tier_id,
            amount=amount,
            minted=tier.minted,
            supply=tier.supply,
            remaining=remaining,
            details=f"PASS: amount {amount} <= remaining {remaining}",
        )
