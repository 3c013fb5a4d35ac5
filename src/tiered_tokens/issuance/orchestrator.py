"""
Issuance Orchestrator — Входная поверхность движка эмиссии

Операции: create_token, add_tier, mint_tokens, burn_tokens,
resolve_token_address.

Поток одного вызова (в одном направлении):
    проверка gates → мутация Tier Ledger → мутация Token Instance → событие

Модель исполнения:
- Каждая операция над токеном выполняется под эксклюзивным локом этого
  токена; конкурентные mint по одному уровню не могут совместно превысить supply
- Всё-или-ничего: предусловия проверяются до первой мутации; если вложенная
  мутация или запись события всё же падает, Tier Ledger, балансы и учёт
  оплат восстанавливаются к состоянию на входе
- События операции буферизуются и записываются в журнал в конце операции,
  внутри той же атомарной границы

Модель авторизации: оркестратор — единственный minter всех токенов, которые
он создаёт: токены получают его приватный MintAuthority, а не строку адреса,
поэтому экземпляр, выданный внешним компонентам, не позволяет mint. Владение
конечного пользователя проверяется по реестру (GATE 1) до вызова mint/burn.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from loguru import logger

from tiered_tokens.audit.event_log import EventLogPort, InMemoryEventLog
from tiered_tokens.config import EngineConfig
from tiered_tokens.core.contracts.validators import validate_event
from tiered_tokens.core.domain.events import TierAdded, TokenEvent, TokensBurned, TokensMinted
from tiered_tokens.core.domain.identity import require_identity
from tiered_tokens.core.domain.tier import Tier
from tiered_tokens.core.errors import NotOwner, TierMissing
from tiered_tokens.core.math.checked_uint import checked_add, require_uint
from tiered_tokens.gatekeeper.gates.gate_01_ownership import Gate01Ownership
from tiered_tokens.gatekeeper.mint_gatekeeper import MintGatekeeper
from tiered_tokens.ledger.tier_ledger import TierLedger
from tiered_tokens.registry.token_registry import TokenRegistry
from tiered_tokens.token.fungible import MintAuthority, TokenInstance


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class TokenAccount:
    """Накопленный учёт токена вне балансов."""

    collected_value: int = 0  # принятая оплата (сдача не возвращается)
    burned: int = 0  # пожизненно сожжено


@dataclass(frozen=True)
class MintReceipt:
    """Квитанция успешного mint_tokens."""

    token: str
    tier_id: int
    recipient: str
    amount: int
    price: int
    required_value: int
    attached_value: int
    excess_value: int  # принято без возврата
    minted_after: int
    remaining_after: int


# =============================================================================
# ORCHESTRATOR
# =============================================================================


class IssuanceOrchestrator:
    """Оркестратор эмиссии: реестр + Tier Ledger + экземпляры токенов."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        event_log: Optional[EventLogPort] = None,
    ):
        """
        Args:
            config: конфигурация движка
            event_log: журнал событий (default: InMemoryEventLog)
        """
        self.config = config or EngineConfig()
        self.event_log: EventLogPort = event_log if event_log is not None else InMemoryEventLog()

        self._authority = MintAuthority(self.config.engine_identity)
        self.registry = TokenRegistry(self.config, emit=self._emit, authority=self._authority)
        self.ledger = TierLedger()
        self.gatekeeper = MintGatekeeper(self.registry, self.ledger, self.config.uint_bits)
        self._ownership = Gate01Ownership(self.registry)

        self._accounts: Dict[str, TokenAccount] = {}
        self._accounts_lock = threading.Lock()
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Операции
    # -------------------------------------------------------------------------

    def create_token(self, name: str, symbol: str, caller: str) -> str:
        """
        Регистрация токена caller'а.

        Raises:
            AlreadyRegistered: Если у caller уже есть токен
        """
        return self.registry.create_token(name, symbol, caller)

    def add_tier(
        self,
        token: str,
        tier_id: int,
        name: str,
        supply: int,
        price: int,
        caller: str,
    ) -> Tier:
        """
        Запись нового уровня (token, tier_id).

        Raises:
            NotOwner: Если зарегистрированный токен caller'а != token
            TierAlreadyExists: Если слот уже записан
        """
        bits = self.config.uint_bits
        require_uint(tier_id, "tier_id", bits)
        require_uint(supply, "supply", bits)
        require_uint(price, "price", bits)
        if not isinstance(name, str):
            raise TypeError(f"name must be str, got {type(name).__name__}")

        self._require_owner(token, caller, "add_tier")

        with self._unit_of_work(token):
            tier = self.ledger.write_tier(token, tier_id, name, supply, price)
            self._emit(TierAdded(token=token, tier_id=tier_id, name=name, supply=supply, price=price))

        logger.info(
            "tier added: token={} tier_id={} supply={} price={}", token, tier_id, supply, price
        )
        return tier

    def mint_tokens(
        self,
        token: str,
        tier_id: int,
        amount: int,
        recipient: str,
        caller: str,
        attached_value: int,
    ) -> MintReceipt:
        """
        Эмиссия amount единиц уровня tier_id получателю recipient.

        Порядок проверок: NotOwner → TierMissing → SupplyExceeded →
        InsufficientPayment. Переплата принимается целиком и не возвращается.

        Raises:
            NotOwner, TierMissing, SupplyExceeded, InsufficientPayment,
            ArithmeticOverflow
        """
        bits = self.config.uint_bits
        require_uint(tier_id, "tier_id", bits)
        require_uint(amount, "amount", bits)
        require_uint(attached_value, "attached_value", bits)
        require_identity(recipient, "recipient")
        if recipient == self._authority.identity:
            raise ValueError("recipient cannot be the engine identity")

        self._require_owner(token, caller, "mint_tokens")

        with self._unit_of_work(token) as instance:
            admission = self.gatekeeper.evaluate(token, tier_id, amount, caller, attached_value)
            if not admission.allowed:
                error = admission.error()
                logger.warning(
                    "mint_tokens blocked: token={} tier_id={} reason={}",
                    token,
                    tier_id,
                    admission.block_reason,
                )
                if error is None:
                    raise RuntimeError(f"mint blocked without error: {admission.block_reason}")
                raise error

            payment = admission.gate04
            account = self._account(token)
            new_account = TokenAccount(
                collected_value=checked_add(account.collected_value, attached_value, bits),
                burned=account.burned,
            )

            tier = self.ledger.record_mint(token, tier_id, amount)
            instance.mint(self._authority, recipient, amount)
            self._set_account(token, new_account)
            self._emit(
                TokensMinted(
                    token=token,
                    tier_id=tier_id,
                    recipient=recipient,
                    amount=amount,
                    price=tier.price,
                    attached_value=attached_value,
                )
            )

        logger.info(
            "tokens minted: token={} tier_id={} amount={} recipient={} minted={}/{}",
            token,
            tier_id,
            amount,
            recipient,
            tier.minted,
            tier.supply,
        )
        return MintReceipt(
            token=token,
            tier_id=tier_id,
            recipient=recipient,
            amount=amount,
            price=tier.price,
            required_value=payment.required_value,
            attached_value=attached_value,
            excess_value=payment.excess_value,
            minted_after=tier.minted,
            remaining_after=tier.remaining(),
        )

    def burn_tokens(self, token: str, amount: int, caller: str) -> int:
        """
        Сжигание amount с собственного баланса caller'а.

        minted уровней не меняется: лимиты уровней ограничивают пожизненную
        эмиссию, а не обращение.

        Returns:
            Баланс caller'а после сжигания

        Raises:
            NotOwner: Если caller не владелец token
            InsufficientBalance: Если баланс caller'а < amount
        """
        bits = self.config.uint_bits
        require_uint(amount, "amount", bits)

        self._require_owner(token, caller, "burn_tokens")

        with self._unit_of_work(token) as instance:
            account = self._account(token)
            new_account = TokenAccount(
                collected_value=account.collected_value,
                burned=checked_add(account.burned, amount, bits),
            )
            instance.burn(self._authority, caller, amount)
            self._set_account(token, new_account)
            self._emit(TokensBurned(token=token, holder=caller, amount=amount))
            balance = instance.balance_of(caller)

        logger.info("tokens burned: token={} holder={} amount={}", token, caller, amount)
        return balance

    def resolve_token_address(self, creator: str) -> Optional[str]:
        """Адрес токена создателя или None (чистый lookup)."""
        return self.registry.resolve(creator)

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def token(self, address: str) -> TokenInstance:
        """Экземпляр токена для внешних компонентов (transfer / transfer_from)."""
        return self.registry.get_token(address)

    def get_tier(self, token: str, tier_id: int) -> Optional[Tier]:
        return self.ledger.get(token, tier_id)

    def tiers_of(self, token: str) -> Dict[int, Tier]:
        return self.ledger.tiers_of(token)

    def remaining(self, token: str, tier_id: int) -> int:
        """
        Raises:
            TierMissing: Если слот не записан
        """
        return self.ledger.require(token, tier_id).remaining()

    def quote(self, token: str, tier_id: int, amount: int) -> int:
        """
        Минимальная оплата за amount единиц уровня.

        Raises:
            TierMissing: Если слот не записан
            ArithmeticOverflow: Если price * amount выходит за u256
        """
        tier = self.ledger.get(token, tier_id)
        if tier is None:
            raise TierMissing(token, tier_id)
        return tier.required_payment(amount, self.config.uint_bits)

    def collected_value(self, token: str) -> int:
        """Сумма принятой оплаты по токену."""
        return self._account(token).collected_value

    def total_burned(self, token: str) -> int:
        return self._account(token).burned

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    def _require_owner(self, token: str, caller: str, operation: str) -> None:
        result = self._ownership.evaluate(token, caller)
        if not result.allowed:
            logger.warning("{} blocked: {}", operation, result.details)
            raise NotOwner(caller, token, result.owned_token)

    def _account(self, token: str) -> TokenAccount:
        with self._accounts_lock:
            return self._accounts.get(token, TokenAccount())

    def _set_account(self, token: str, account: TokenAccount) -> None:
        with self._accounts_lock:
            self._accounts[token] = account

    @contextmanager
    def _unit_of_work(self, token: str) -> Iterator[TokenInstance]:
        """
        Атомарная граница операции над одним токеном.

        Держит лок токена, снимает снимки токена, Tier Ledger и учёта;
        события операции буферизуются и записываются в журнал одной
        пачкой (append_batch) в конце: в журнал попадают все события
        операции или ни одного.
        """
        instance = self.registry.get_token(token)
        with instance.atomic(), self.ledger.atomic(token):
            account = self._account(token)
            self._local.pending = []
            try:
                try:
                    yield instance
                    pending: List[TokenEvent] = self._local.pending
                finally:
                    self._local.pending = None

                if pending:
                    self.event_log.append_batch(pending)
            except BaseException:
                self._set_account(token, account)
                raise

    def _emit(self, event: TokenEvent) -> None:
        if self.config.validate_event_contracts:
            validate_event(event.to_dict())

        pending = getattr(self._local, "pending", None)
        if pending is not None:
            pending.append(event)
        else:
            self.event_log.append(event)
