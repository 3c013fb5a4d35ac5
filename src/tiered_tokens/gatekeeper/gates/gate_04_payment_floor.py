"""GATE 4: Payment Floor — attached_value >= price * amount

- price * amount вычисляется checked; переполнение блокирует операцию
  (block_reason = arithmetic_overflow), а не оборачивается
- Переплата принимается целиком; сдача не возвращается (excess_value
  фиксируется только для диагностики и квитанции)
"""

from dataclasses import dataclass
from typing import Optional

from tiered_tokens.core.errors import (
    ArithmeticOverflow,
    InsufficientPayment,
    TokenEngineError,
)
from tiered_tokens.core.math.checked_uint import UINT_BITS_DEFAULT, require_uint
from tiered_tokens.gatekeeper.gates.gate_02_tier_presence import Gate02Result
from tiered_tokens.gatekeeper.gates.gate_03_supply_ceiling import Gate03Result


@dataclass(frozen=True)
class Gate04Result:
    """Результат GATE 4."""

    allowed: bool
    block_reason: str

    token: str
    tier_id: int
    amount: int
    price: int
    required_value: int
    attached_value: int
    excess_value: int

    details: str

    def to_error(self) -> Optional[TokenEngineError]:
        if self.allowed:
            return None
        if self.block_reason == "insufficient_payment":
            return InsufficientPayment(self.token, self.tier_id, self.required_value, self.attached_value)
        if self.block_reason == "arithmetic_overflow":
            return ArithmeticOverflow("mul", self.price, self.amount)
        return None


class Gate04PaymentFloor:
    """GATE 4: Payment Floor.

    Разрядность bits общая с оркестратором: price * amount, не
    помещающийся в 2**bits - 1, блокируется как arithmetic_overflow.
    """

    def __init__(self, bits: int = UINT_BITS_DEFAULT):
        self.bits = bits

    def evaluate(
        self,
        gate02_result: Gate02Result,
        gate03_result: Gate03Result,
        attached_value: int,
    ) -> Gate04Result:
        """Оценка GATE 4.

        Args:
            gate02_result: результат GATE 2 (цена уровня)
            gate03_result: результат GATE 3 (должен быть PASS)
            attached_value: приложенная оплата
        """
        require_uint(attached_value, "attached_value", self.bits)
        amount = gate03_result.amount
        tier = gate02_result.tier

        if not gate03_result.allowed or tier is None:
            return self._blocked(
                reason=f"gate03_blocked: {gate03_result.block_reason}",
                gate03_result=gate03_result,
                price=tier.price if tier is not None else 0,
                attached_value=attached_value,
                details=f"GATE 3 blocked: {gate03_result.details}",
            )

        try:
            required = tier.required_payment(amount, self.bits)
        except ArithmeticOverflow:
            return self._blocked(
                reason="arithmetic_overflow",
                gate03_result=gate03_result,
                price=tier.price,
                attached_value=attached_value,
                details=f"price {tier.price} * amount {amount} overflows u{self.bits}",
            )

        if attached_value < required:
            return Gate04Result(
                allowed=False,
                block_reason="insufficient_payment",
                token=tier.token,
                tier_id=tier.tier_id,
                amount=amount,
                price=tier.price,
                required_value=required,
                attached_value=attached_value,
                excess_value=0,
                details=f"attached {attached_value} < required {required}",
            )

        return Gate04Result(
            allowed=True,
            block_reason="",
            token=tier.token,
            tier_id=tier.tier_id,
            amount=amount,
            price=tier.price,
            required_value=required,
            attached_value=attached_value,
            excess_value=attached_value - required,
            details=f"PASS: attached {attached_value} >= required {required}",
        )

    def _blocked(
        self,
        reason: str,
        gate03_result: Gate03Result,
        price: int,
        attached_value: int,
        details: str,
    ) -> Gate04Result:
        return Gate04Result(
            allowed=False,
            block_reason=reason,
            token=gate03_result.token,
            tier_id=gate03_result.tier_id,
            amount=gate03_result.amount,
            price=price,
            required_value=0,
            attached_value=attached_value,
            excess_value=0,
            details=details,
        )
