"""
Тесты для модуля Checked UInt

Проверяет:
1. Валидацию входов (тип, диапазон)
2. Checked сложение / вычитание / умножение
3. Граничные случаи u256 и малой разрядности
"""

import pytest

from tiered_tokens.core.errors import ArithmeticOverflow
from tiered_tokens.core.math.checked_uint import (
    UINT256_MAX,
    checked_add,
    checked_mul,
    checked_sub,
    fits_uint,
    require_uint,
    uint_max,
)

# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


class TestRequireUint:
    """Тесты для require_uint"""

    def test_valid_values_returned_unchanged(self) -> None:
        """Значения в диапазоне возвращаются без изменений"""
        assert require_uint(0) == 0
        assert require_uint(42) == 42
        assert require_uint(UINT256_MAX) == UINT256_MAX

    def test_negative_rejected(self) -> None:
        """Отрицательные значения — выход за беззнаковый диапазон"""
        with pytest.raises(ArithmeticOverflow):
            require_uint(-1)

    def test_above_max_rejected(self) -> None:
        """Значения выше UINT_MAX отклоняются"""
        with pytest.raises(ArithmeticOverflow):
            require_uint(UINT256_MAX + 1)

    def test_float_rejected(self) -> None:
        """Float не участвует в количественных расчётах"""
        with pytest.raises(TypeError, match="amount must be int"):
            require_uint(1.0, "amount")

    def test_bool_rejected(self) -> None:
        """bool — подкласс int, но не количество"""
        with pytest.raises(TypeError):
            require_uint(True)

    def test_small_bit_width(self) -> None:
        """Разрядность 8 бит: максимум 255"""
        assert require_uint(255, bits=8) == 255
        with pytest.raises(ArithmeticOverflow):
            require_uint(256, bits=8)


class TestUintMax:
    def test_known_values(self) -> None:
        assert uint_max(8) == 255
        assert uint_max(256) == UINT256_MAX

    def test_non_positive_bits_rejected(self) -> None:
        with pytest.raises(ValueError):
            uint_max(0)


# =============================================================================
# CHECKED OPERATIONS
# =============================================================================


class TestCheckedAdd:
    def test_simple_sum(self) -> None:
        assert checked_add(2, 3) == 5

    def test_sum_at_max_allowed(self) -> None:
        """Результат ровно UINT_MAX допустим"""
        assert checked_add(UINT256_MAX - 1, 1) == UINT256_MAX

    def test_overflow_raises(self) -> None:
        """Переполнение не оборачивается"""
        with pytest.raises(ArithmeticOverflow) as exc_info:
            checked_add(UINT256_MAX, 1)
        assert exc_info.value.code == "ArithmeticOverflow"
        assert exc_info.value.context["operation"] == "add"

    def test_overflow_small_width(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            checked_add(200, 56, bits=8)


class TestCheckedSub:
    def test_simple_difference(self) -> None:
        assert checked_sub(10, 3) == 7

    def test_equal_operands_give_zero(self) -> None:
        assert checked_sub(5, 5) == 0

    def test_underflow_raises(self) -> None:
        """Результат < 0 — антипереполнение"""
        with pytest.raises(ArithmeticOverflow):
            checked_sub(3, 4)


class TestCheckedMul:
    def test_price_times_amount(self) -> None:
        assert checked_mul(5, 100) == 500

    def test_zero_operand(self) -> None:
        assert checked_mul(0, UINT256_MAX) == 0

    def test_overflow_raises(self) -> None:
        with pytest.raises(ArithmeticOverflow):
            checked_mul(2**128, 2**128)

    def test_largest_non_overflowing_product(self) -> None:
        assert checked_mul(2**128 - 1, 2**128 + 1) == 2**256 - 1


class TestFitsUint:
    def test_no_exception_variant(self) -> None:
        assert fits_uint(0)
        assert fits_uint(UINT256_MAX)
        assert not fits_uint(-1)
        assert not fits_uint(UINT256_MAX + 1)
        assert not fits_uint(1.5)
        assert not fits_uint(False)
