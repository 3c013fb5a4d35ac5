"""Gatekeeper — цепочка gates для допуска операций эмиссии.

Gates только читают состояние и возвращают frozen результат
(allowed / block_reason / details); оркестратор превращает первый
заблокировавший результат в конкретное исключение.
"""

from .mint_gatekeeper import MintAdmission, MintGatekeeper

__all__ = [
    "MintGatekeeper",
    "MintAdmission",
]
