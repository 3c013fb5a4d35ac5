"""
Tier Ledger — Учёт уровней эмиссии по (token, tier_id)

Каждый слот (token, tier_id) записывается ровно один раз (write_tier) и
далее меняется только через record_mint (рост minted).

Существование слота определяется явно (Optional[Tier]), а не по
supply == 0. Поэтому уровни с нулевым supply допустимы: они существуют,
но любая положительная эмиссия по ним отклоняется как SupplyExceeded.

Проверки владения и оплаты выполняет оркестратор; ledger отвечает
только за инварианты слота.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from tiered_tokens.core.domain.tier import Tier
from tiered_tokens.core.errors import TierAlreadyExists, TierMissing


class TierLedger:
    """Хранилище слотов Tier, сгруппированных по токену."""

    def __init__(self):
        self._slots: Dict[str, Dict[int, Tier]] = {}
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def get(self, token: str, tier_id: int) -> Optional[Tier]:
        """Слот или None, если не записан."""
        with self._lock:
            return self._slots.get(token, {}).get(tier_id)

    def exists(self, token: str, tier_id: int) -> bool:
        return self.get(token, tier_id) is not None

    def require(self, token: str, tier_id: int) -> Tier:
        """
        Raises:
            TierMissing: Если слот не записан
        """
        tier = self.get(token, tier_id)
        if tier is None:
            raise TierMissing(token, tier_id)
        return tier

    def tiers_of(self, token: str) -> Dict[int, Tier]:
        """Снимок всех уровней токена, упорядоченных по tier_id."""
        with self._lock:
            return dict(sorted(self._slots.get(token, {}).items()))

    def total_minted(self, token: str) -> int:
        """Сумма minted по всем уровням токена (пожизненная эмиссия)."""
        with self._lock:
            return sum(t.minted for t in self._slots.get(token, {}).values())

    # -------------------------------------------------------------------------
    # Запись
    # -------------------------------------------------------------------------

    def write_tier(self, token: str, tier_id: int, name: str, supply: int, price: int) -> Tier:
        """
        Запись нового слота {name, supply, minted: 0, price}.

        Raises:
            TierAlreadyExists: Если слот уже записан
            ValidationError: Если параметры вне u256 или не int
        """
        with self._lock:
            if self.exists(token, tier_id):
                raise TierAlreadyExists(token, tier_id)

            tier = Tier(token=token, tier_id=tier_id, name=name, supply=supply, minted=0, price=price)
            self._slots.setdefault(token, {})[tier_id] = tier
            return tier

    def record_mint(self, token: str, tier_id: int, amount: int) -> Tier:
        """
        Увеличение minted слота на amount.

        Raises:
            TierMissing: Если слот не записан
            SupplyExceeded: Если minted + amount > supply
        """
        with self._lock:
            updated = self.require(token, tier_id).with_minted(amount)
            self._slots[token][tier_id] = updated
            return updated

    @contextmanager
    def atomic(self, token: str) -> Iterator["TierLedger"]:
        """
        Всё-или-ничего для слотов одного токена.

        Вызывающий сериализует операции над token (лок токена);
        слоты других токенов снимок не затрагивает.
        """
        with self._lock:
            had_token = token in self._slots
            snapshot = dict(self._slots.get(token, {}))
        try:
            yield self
        except BaseException:
            with self._lock:
                if had_token:
                    self._slots[token] = snapshot
                else:
                    self._slots.pop(token, None)
            raise
