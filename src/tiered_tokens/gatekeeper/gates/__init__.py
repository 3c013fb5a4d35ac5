"""Gates — индивидуальные предусловия операций эмиссии.

- GATE 1: Ownership (caller владеет токеном по реестру)
- GATE 2: Tier Presence (слот (token, tier_id) записан)
- GATE 3: Supply Ceiling (minted + amount <= supply)
- GATE 4: Payment Floor (attached_value >= price * amount)
"""

from .gate_01_ownership import Gate01Ownership, Gate01Result
from .gate_02_tier_presence import Gate02TierPresence, Gate02Result
from .gate_03_supply_ceiling import Gate03SupplyCeiling, Gate03Result
from .gate_04_payment_floor import Gate04PaymentFloor, Gate04Result

__all__ = [
    "Gate01Ownership",
    "Gate01Result",
    "Gate02TierPresence",
    "Gate02Result",
    "Gate03SupplyCeiling",
    "Gate03Result",
    "Gate04PaymentFloor",
    "Gate04Result",
]
