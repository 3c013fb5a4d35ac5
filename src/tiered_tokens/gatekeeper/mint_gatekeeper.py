"""Mint Gatekeeper — цепочка gates для mint_tokens

Фиксированный порядок:
1. GATE 1 Ownership       → NotOwner
2. GATE 2 Tier Presence   → TierMissing
3. GATE 3 Supply Ceiling  → SupplyExceeded
4. GATE 4 Payment Floor   → InsufficientPayment / ArithmeticOverflow

Все gates только читают состояние; вызывающий удерживает лок токена,
поэтому решение актуально до конца операции.
"""

from dataclasses import dataclass
from typing import Optional

from tiered_tokens.core.errors import TokenEngineError
from tiered_tokens.core.math.checked_uint import UINT_BITS_DEFAULT
from tiered_tokens.gatekeeper.gates.gate_01_ownership import Gate01Ownership, Gate01Result
from tiered_tokens.gatekeeper.gates.gate_02_tier_presence import Gate02Result, Gate02TierPresence
from tiered_tokens.gatekeeper.gates.gate_03_supply_ceiling import Gate03Result, Gate03SupplyCeiling
from tiered_tokens.gatekeeper.gates.gate_04_payment_floor import Gate04PaymentFloor, Gate04Result
from tiered_tokens.ledger.tier_ledger import TierLedger
from tiered_tokens.registry.token_registry import TokenRegistry


@dataclass(frozen=True)
class MintAdmission:
    """Итог цепочки gates для одного запроса mint."""

    gate01: Gate01Result
    gate02: Gate02Result
    gate03: Gate03Result
    gate04: Gate04Result

    @property
    def allowed(self) -> bool:
        return self.gate04.allowed

    @property
    def block_reason(self) -> str:
        """Причина первого заблокировавшего gate ('' если допущен)."""
        for result in (self.gate01, self.gate02, self.gate03, self.gate04):
            if not result.allowed:
                return result.block_reason
        return ""

    def error(self) -> Optional[TokenEngineError]:
        """Исключение первого заблокировавшего gate."""
        for result in (self.gate01, self.gate02, self.gate03, self.gate04):
            err = result.to_error()
            if err is not None:
                return err
        return None


class MintGatekeeper:
    """Последовательная оценка GATE 1-4 для mint_tokens."""

    def __init__(self, registry: TokenRegistry, ledger: TierLedger, bits: int = UINT_BITS_DEFAULT):
        self.gate01 = Gate01Ownership(registry)
        self.gate02 = Gate02TierPresence(ledger)
        self.gate03 = Gate03SupplyCeiling(bits)
        self.gate04 = Gate04PaymentFloor(bits)

    def evaluate(
        self,
        token: str,
        tier_id: int,
        amount: int,
        caller: str,
        attached_value: int,
    ) -> MintAdmission:
        gate01_result = self.gate01.evaluate(token, caller)
        gate02_result = self.gate02.evaluate(gate01_result, tier_id)
        gate03_result = self.gate03.evaluate(gate02_result, amount)
        gate04_result = self.gate04.evaluate(gate02_result, gate03_result, attached_value)

        return MintAdmission(
            gate01=gate01_result,
            gate02=gate02_result,
            gate03=gate03_result,
            gate04=gate04_result,
        )
