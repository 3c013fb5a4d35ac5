"""GATE 1: Ownership — вызывающий владеет токеном

Первый gate в цепочке add_tier / mint_tokens / burn_tokens.
- Блокирует, если зарегистрированный токен caller'а != token
- Блокирует, если у caller'а нет токена вовсе

Интеграция:
- Использует TokenRegistry.resolve (чистый lookup)
- Не мутирует состояние
"""

from dataclasses import dataclass
from typing import Optional

from tiered_tokens.core.errors import NotOwner, TokenEngineError
from tiered_tokens.registry.token_registry import TokenRegistry


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    caller: str
    token: str
    owned_token: Optional[str]

    # Детали
    details: str

    def to_error(self) -> Optional[TokenEngineError]:
        if self.allowed:
            return None
        return NotOwner(self.caller, self.token, self.owned_token)


class Gate01Ownership:
    """GATE 1: Ownership.

    Владение определяется только реестром: caller владеет token, если
    registry.resolve(caller) == token.
    """

    def __init__(self, registry: TokenRegistry):
        self.registry = registry

    def evaluate(self, token: str, caller: str) -> Gate01Result:
        """Оценка GATE 1.

        Args:
            token: адрес токена из запроса
            caller: идентичность вызывающего

        Returns:
            Gate01Result с решением о допуске
        """
        owned_token = self.registry.resolve(caller)

        if owned_token is None:
            return Gate01Result(
                allowed=False,
                block_reason="not_owner",
                caller=caller,
                token=token,
                owned_token=None,
                details=f"caller {caller} has no registered token",
            )

        if owned_token != token:
            return Gate01Result(
                allowed=False,
                block_reason="not_owner",
                caller=caller,
                token=token,
                owned_token=owned_token,
                details=f"caller {caller} owns {owned_token}, not {token}",
            )

        return Gate01Result(
            allowed=True,
            block_reason="",
            caller=caller,
            token=token,
            owned_token=owned_token,
            details=f"PASS: caller {caller} owns {token}",
        )
