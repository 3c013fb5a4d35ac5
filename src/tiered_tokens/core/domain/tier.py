"""
Tier — Модель ценового уровня эмиссии

Immutable Pydantic модель слота (token, tier_id) в Tier Ledger.

Инварианты:
- supply фиксирован при создании (лимит пожизненной эмиссии, не обращения)
- minted монотонно не убывает; burn его не уменьшает
- minted <= supply в любой момент времени
- price — целая цена за единицу, фиксирована при создании

Все изменения создают новый экземпляр (frozen=True).
"""

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator, model_validator

from tiered_tokens.core.errors import SupplyExceeded
from tiered_tokens.core.math.checked_uint import (
    UINT256_MAX,
    UINT_BITS_DEFAULT,
    checked_add,
    checked_mul,
    checked_sub,
    require_uint,
)


class Tier(BaseModel):
    """
    Уровень эмиссии токена.

    Слот записывается ровно один раз операцией add_tier; далее меняется
    только minted через with_minted().
    """

    # Идентификация
    token: StrictStr = Field(..., min_length=1, description="Адрес токена-владельца слота")
    tier_id: StrictInt = Field(..., ge=0, description="Идентификатор уровня (выбирает создатель)")
    name: StrictStr = Field(..., description="Описательная метка, только информационная")

    # Параметры эмиссии
    supply: StrictInt = Field(..., ge=0, description="Максимум пожизненной эмиссии")
    minted: StrictInt = Field(default=0, ge=0, description="Накопленная эмиссия")
    price: StrictInt = Field(..., ge=0, description="Цена за единицу (целая)")

    model_config = {"frozen": True}  # Immutable

    @field_validator("tier_id", "supply", "minted", "price")
    @classmethod
    def validate_uint_range(cls, v: int) -> int:
        """Верхняя граница u256."""
        if v > UINT256_MAX:
            raise ValueError(f"value {v} exceeds u256 maximum")
        return v

    @model_validator(mode="after")
    def validate_minted_within_supply(self) -> "Tier":
        if self.minted > self.supply:
            raise ValueError(f"minted {self.minted} exceeds supply {self.supply}")
        return self

    def remaining(self) -> int:
        """Остаток, доступный для эмиссии: supply - minted."""
        return checked_sub(self.supply, self.minted)

    def can_mint(self, amount: int) -> bool:
        """Проверка supply ceiling без exception."""
        require_uint(amount, "amount")
        return amount <= self.remaining()

    def required_payment(self, amount: int, bits: int = UINT_BITS_DEFAULT) -> int:
        """
        Минимальная оплата за amount единиц: price * amount.

        Raises:
            ArithmeticOverflow: Если произведение выходит за 2**bits - 1
        """
        return checked_mul(self.price, amount, bits)

    def with_minted(self, amount: int) -> "Tier":
        """
        Новый экземпляр с minted, увеличенным на amount.

        Raises:
            SupplyExceeded: Если minted + amount > supply
            ArithmeticOverflow: Если minted + amount выходит за u256
        """
        new_minted = checked_add(self.minted, amount)
        if new_minted > self.supply:
            raise SupplyExceeded(self.token, self.tier_id, self.minted, amount, self.supply)

        return Tier(
            token=self.token,
            tier_id=self.tier_id,
            name=self.name,
            supply=self.supply,
            minted=new_minted,
            price=self.price,
        )
