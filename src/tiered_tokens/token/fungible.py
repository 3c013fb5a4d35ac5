"""
Token Instance — Fungible-balance ledger одного создателя

Явные параметры caller у всех мутирующих вызовов (нет ambient msg.sender).
Вся арифметика — checked u256, без оборачивания.

Модель авторизации:
- creator — владелец линии токена (информационно, неизменяем)
- minter  — объект MintAuthority, фиксируется при создании. mint/burn
            принимают только этот же объект (сравнение по identity), строка
            с совпадающим адресом не авторизует. В движке MintAuthority
            хранит оркестратор, который проверяет владение через реестр
            до вызова mint/burn.

Инварианты:
- total_supply == сумма балансов
- балансы никогда не отрицательны
- total_supply меняется только через mint (рост) и burn (снижение)

Стандартная fungible-возможность для внешних компонентов:
transfer / approve / allowance / transfer_from.
"""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from loguru import logger

from tiered_tokens.core.domain.events import Approval, TokenEvent, Transfer
from tiered_tokens.core.domain.identity import ZERO_ADDRESS, require_identity
from tiered_tokens.core.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    Unauthorized,
)
from tiered_tokens.core.math.checked_uint import (
    UINT_BITS_DEFAULT,
    checked_add,
    checked_sub,
    require_uint,
)

EventSink = Callable[[TokenEvent], object]


class MintAuthority:
    """
    Право mint/burn токенов.

    Авторизует сам объект, а не адрес: знание identity (публичной строки)
    не даёт права выпуска.
    """

    __slots__ = ("_identity",)

    def __init__(self, identity: str):
        self._identity = require_identity(identity, "identity")

    @property
    def identity(self) -> str:
        return self._identity

    def __repr__(self) -> str:
        return f"MintAuthority({self._identity!r})"


class TokenInstance:
    """Fungible токен одного создателя."""

    def __init__(
        self,
        address: str,
        name: str,
        symbol: str,
        creator: str,
        minter: MintAuthority,
        decimals: int = 18,
        bits: int = UINT_BITS_DEFAULT,
        emit: Optional[EventSink] = None,
    ):
        """
        Args:
            address: адрес (ссылка) токена
            name: название токена
            symbol: тикер
            creator: владелец линии токена
            minter: право mint/burn (MintAuthority)
            decimals: количество десятичных знаков (метаданные)
            bits: разрядность беззнаковой арифметики
            emit: приёмник Transfer/Approval событий
        """
        if not name or not name.strip():
            raise ValueError("name must be non-empty")
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be non-empty")

        self._address = require_identity(address, "address")
        self._name = name
        self._symbol = symbol
        self._creator = require_identity(creator, "creator")
        if not isinstance(minter, MintAuthority):
            raise TypeError(f"minter must be MintAuthority, got {type(minter).__name__}")
        self._minter = minter
        self._decimals = decimals
        self._bits = bits
        self._emit = emit

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[str, Dict[str, int]] = {}
        self._total_supply = 0

        # Единый реентерабельный лок: его же удерживает оркестратор
        # на всё время операции над этим токеном
        self.lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Метаданные
    # -------------------------------------------------------------------------

    @property
    def address(self) -> str:
        return self._address

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def creator(self) -> str:
        return self._creator

    @property
    def minter(self) -> str:
        """Адрес minter'а (информационно; права не даёт)."""
        return self._minter.identity

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def total_supply(self) -> int:
        with self.lock:
            return self._total_supply

    def balance_of(self, holder: str) -> int:
        with self.lock:
            return self._balances.get(holder, 0)

    def allowance(self, owner: str, spender: str) -> int:
        with self.lock:
            return self._allowances.get(owner, {}).get(spender, 0)

    def holders(self) -> Dict[str, int]:
        """Снимок ненулевых балансов."""
        with self.lock:
            return {h: b for h, b in self._balances.items() if b > 0}

    # -------------------------------------------------------------------------
    # Mint / Burn (только minter)
    # -------------------------------------------------------------------------

    def mint(self, caller: MintAuthority, to: str, amount: int) -> None:
        """
        Увеличение баланса to и total_supply на amount.

        Raises:
            Unauthorized: Если caller не MintAuthority этого токена
            ArithmeticOverflow: Если баланс или total_supply выходит за u256
        """
        with self.lock:
            self._require_minter(caller)
            require_identity(to, "to")
            require_uint(amount, "amount", self._bits)

            new_supply = checked_add(self._total_supply, amount, self._bits)
            new_balance = checked_add(self._balances.get(to, 0), amount, self._bits)

            self._total_supply = new_supply
            self._balances[to] = new_balance

            logger.debug("{} mint {} -> {}", self._symbol, amount, to)
            self._record(Transfer(token=self._address, sender=ZERO_ADDRESS, recipient=to, amount=amount))

    def burn(self, caller: MintAuthority, holder: str, amount: int) -> None:
        """
        Уменьшение баланса holder и total_supply на amount.

        Raises:
            Unauthorized: Если caller не MintAuthority этого токена
            InsufficientBalance: Если баланс holder < amount
        """
        with self.lock:
            self._require_minter(caller)
            require_uint(amount, "amount", self._bits)

            balance = self._balances.get(holder, 0)
            if balance < amount:
                raise InsufficientBalance(holder, balance, amount)

            self._balances[holder] = checked_sub(balance, amount, self._bits)
            self._total_supply = checked_sub(self._total_supply, amount, self._bits)

            logger.debug("{} burn {} from {}", self._symbol, amount, holder)
            self._record(Transfer(token=self._address, sender=holder, recipient=ZERO_ADDRESS, amount=amount))

    # -------------------------------------------------------------------------
    # Стандартная fungible-возможность
    # -------------------------------------------------------------------------

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        """
        Перевод amount с баланса caller на to.

        Returns:
            True при успехе

        Raises:
            InsufficientBalance: Если баланс caller < amount
        """
        with self.atomic():
            require_identity(caller, "caller")
            self._move(caller, to, amount)
            return True

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        """Установка allowance[caller][spender] = amount (перезапись)."""
        with self.atomic():
            require_identity(caller, "caller")
            require_identity(spender, "spender")
            require_uint(amount, "amount", self._bits)

            self._allowances.setdefault(caller, {})[spender] = amount
            self._record(Approval(token=self._address, owner=caller, spender=spender, amount=amount))
            return True

    def increase_allowance(self, caller: str, spender: str, added: int) -> bool:
        with self.lock:
            current = self.allowance(caller, spender)
            return self.approve(caller, spender, checked_add(current, added, self._bits))

    def decrease_allowance(self, caller: str, spender: str, subtracted: int) -> bool:
        with self.lock:
            current = self.allowance(caller, spender)
            if subtracted > current:
                raise InsufficientAllowance(caller, spender, current, subtracted)
            return self.approve(caller, spender, checked_sub(current, subtracted, self._bits))

    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool:
        """
        Перевод amount с баланса owner на to за счёт allowance caller'а.

        Raises:
            InsufficientAllowance: Если allowance[owner][caller] < amount
            InsufficientBalance: Если баланс owner < amount
        """
        with self.atomic():
            require_identity(caller, "caller")
            require_identity(to, "to")
            require_uint(amount, "amount", self._bits)

            current = self.allowance(owner, caller)
            if current < amount:
                raise InsufficientAllowance(owner, caller, current, amount)

            # Баланс проверяется до списания allowance
            balance = self._balances.get(owner, 0)
            if balance < amount:
                raise InsufficientBalance(owner, balance, amount)

            self._allowances.setdefault(owner, {})[caller] = checked_sub(current, amount, self._bits)
            self._move(owner, to, amount)
            return True

    # -------------------------------------------------------------------------
    # Атомарность
    # -------------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator["TokenInstance"]:
        """
        Всё-или-ничего: при исключении внутри блока балансы, allowances
        и total_supply восстанавливаются к снимку на входе.
        """
        with self.lock:
            balances = dict(self._balances)
            allowances = {owner: dict(spenders) for owner, spenders in self._allowances.items()}
            total_supply = self._total_supply
            try:
                yield self
            except BaseException:
                self._balances = balances
                self._allowances = allowances
                self._total_supply = total_supply
                raise

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    def _require_minter(self, caller: Any) -> None:
        if caller is not self._minter:
            raise Unauthorized(str(getattr(caller, "identity", caller)), self._address)

    def _move(self, sender: str, to: str, amount: int) -> None:
        require_identity(to, "to")
        require_uint(amount, "amount", self._bits)

        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount)

        new_sender_balance = checked_sub(balance, amount, self._bits)
        if sender == to:
            new_recipient_balance = balance
        else:
            new_recipient_balance = checked_add(self._balances.get(to, 0), amount, self._bits)

        self._balances[sender] = new_sender_balance
        self._balances[to] = new_recipient_balance

        self._record(Transfer(token=self._address, sender=sender, recipient=to, amount=amount))

    def _record(self, event: TokenEvent) -> None:
        if self._emit is not None:
            self._emit(event)

    def __repr__(self) -> str:
        return f"TokenInstance(address={self._address!r}, symbol={self._symbol!r}, creator={self._creator!r})"
