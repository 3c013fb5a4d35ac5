"""
Errors — Таксономия ошибок движка эмиссии

Каждая ошибка — нарушение предусловия, обнаруженное синхронно до мутации
состояния. Операция, завершившаяся ошибкой, не оставляет частичных эффектов.

Клиент получает конкретный тип ошибки (а не generic fault) и может решить,
повторять ли вызов с другими параметрами.
"""

from typing import Any, Dict, Optional


# =============================================================================
# BASE
# =============================================================================


class TokenEngineError(Exception):
    """
    Базовая ошибка движка.

    Attributes:
        code: Стабильный машиночитаемый код ошибки
        context: Структурированный контекст (token, tier_id, amount, ...)
    """

    code: str = "TokenEngineError"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "context": dict(self.context)}


# =============================================================================
# REGISTRY / OWNERSHIP
# =============================================================================


class AlreadyRegistered(TokenEngineError):
    """Создатель уже зарегистрировал токен (не более одного на создателя)."""

    code = "AlreadyRegistered"

    def __init__(self, creator: str, token: str):
        super().__init__(
            f"creator {creator} already owns token {token}", creator=creator, token=token
        )


class NotOwner(TokenEngineError):
    """Вызывающий не является зарегистрированным владельцем токена."""

    code = "NotOwner"

    def __init__(self, caller: str, token: str, owned_token: Optional[str] = None):
        super().__init__(
            f"caller {caller} is not the owner of token {token}",
            caller=caller,
            token=token,
            owned_token=owned_token,
        )


class TokenNotFound(TokenEngineError):
    """Адрес токена не зарегистрирован в реестре."""

    code = "TokenNotFound"

    def __init__(self, token: str):
        super().__init__(f"unknown token {token}", token=token)


# =============================================================================
# TIER LEDGER
# =============================================================================


class TierAlreadyExists(TokenEngineError):
    """Слот (token, tier_id) уже записан."""

    code = "TierAlreadyExists"

    def __init__(self, token: str, tier_id: int):
        super().__init__(f"tier {tier_id} already exists for token {token}", token=token, tier_id=tier_id)


class TierMissing(TokenEngineError):
    """Слот (token, tier_id) не записан."""

    code = "TierMissing"

    def __init__(self, token: str, tier_id: int):
        super().__init__(f"tier {tier_id} does not exist for token {token}", token=token, tier_id=tier_id)


class SupplyExceeded(TokenEngineError):
    """minted + amount > supply."""

    code = "SupplyExceeded"

    def __init__(self, token: str, tier_id: int, minted: int, amount: int, supply: int):
        super().__init__(
            f"tier {tier_id} of token {token}: minted {minted} + amount {amount} exceeds supply {supply}",
            token=token,
            tier_id=tier_id,
            minted=minted,
            amount=amount,
            supply=supply,
        )


class InsufficientPayment(TokenEngineError):
    """attached_value < price * amount."""

    code = "InsufficientPayment"

    def __init__(self, token: str, tier_id: int, required: int, attached: int):
        super().__init__(
            f"tier {tier_id} of token {token}: attached value {attached} below required {required}",
            token=token,
            tier_id=tier_id,
            required=required,
            attached=attached,
        )


# =============================================================================
# TOKEN INSTANCE
# =============================================================================


class Unauthorized(TokenEngineError):
    """Вызов mint/burn не от авторизованного minter'а."""

    code = "Unauthorized"

    def __init__(self, caller: str, token: str):
        super().__init__(f"caller {caller} may not mint or burn token {token}", caller=caller, token=token)


class InsufficientBalance(TokenEngineError):
    """Баланс держателя меньше запрошенной суммы."""

    code = "InsufficientBalance"

    def __init__(self, holder: str, balance: int, amount: int):
        super().__init__(
            f"holder {holder} balance {balance} is below amount {amount}",
            holder=holder,
            balance=balance,
            amount=amount,
        )


class InsufficientAllowance(TokenEngineError):
    """Разрешение (allowance) меньше запрошенной суммы."""

    code = "InsufficientAllowance"

    def __init__(self, owner: str, spender: str, allowance: int, amount: int):
        super().__init__(
            f"spender {spender} allowance {allowance} from {owner} is below amount {amount}",
            owner=owner,
            spender=spender,
            allowance=allowance,
            amount=amount,
        )


# =============================================================================
# ARITHMETIC
# =============================================================================


class ArithmeticOverflow(TokenEngineError):
    """
    Выход за пределы беззнакового диапазона [0, 2**bits - 1].

    Арифметика никогда не оборачивается (no wrap): переполнение и
    антипереполнение всегда завершают операцию ошибкой.
    """

    code = "ArithmeticOverflow"

    def __init__(self, operation: str, *operands: int):
        super().__init__(
            f"unsigned {operation} out of range: {operands}",
            operation=operation,
            operands=list(operands),
        )
