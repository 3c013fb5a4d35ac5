"""
Checked UInt — Беззнаковая целочисленная арифметика с проверкой диапазона

Модуль обеспечивает корректность всех количественных операций движка:
- Валидация входных значений (только int, не bool, в диапазоне [0, UINT_MAX])
- Сложение / вычитание / умножение с fail-closed семантикой
- Ни одна операция не оборачивается по модулю

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат любой операции лежит в [0, UINT_MAX] либо выбрасывается ArithmeticOverflow
2. Float никогда не участвует в расчётах количеств и цен
3. Все операции детерминированы
"""

from typing import Final

from tiered_tokens.core.errors import ArithmeticOverflow

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Разрядность по умолчанию (u256)
UINT_BITS_DEFAULT: Final[int] = 256

# Максимальное значение u256
UINT256_MAX: Final[int] = 2**256 - 1


def uint_max(bits: int = UINT_BITS_DEFAULT) -> int:
    """
    Максимальное значение для заданной разрядности.

    Examples:
        >>> uint_max(8)
        255
    """
    if bits <= 0:
        raise ValueError(f"bits must be positive, got {bits}")
    return 2**bits - 1


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def require_uint(value: int, name: str = "value", bits: int = UINT_BITS_DEFAULT) -> int:
    """
    Валидация беззнакового целого.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        bits: Разрядность

    Returns:
        value без изменений

    Raises:
        TypeError: Если value не int (bool тоже отклоняется)
        ArithmeticOverflow: Если value < 0 или value > UINT_MAX
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")

    if value < 0 or value > uint_max(bits):
        raise ArithmeticOverflow(f"bound({name})", value)

    return value


# =============================================================================
# CHECKED OPERATIONS
# =============================================================================


def checked_add(a: int, b: int, bits: int = UINT_BITS_DEFAULT) -> int:
    """
    a + b с проверкой переполнения.

    Examples:
        >>> checked_add(2, 3)
        5
        >>> checked_add(254, 1, bits=8)
        255
    """
    require_uint(a, "a", bits)
    require_uint(b, "b", bits)

    result = a + b
    if result > uint_max(bits):
        raise ArithmeticOverflow("add", a, b)
    return result


def checked_sub(a: int, b: int, bits: int = UINT_BITS_DEFAULT) -> int:
    """a - b с проверкой антипереполнения (результат не может быть < 0)."""
    require_uint(a, "a", bits)
    require_uint(b, "b", bits)

    if b > a:
        raise ArithmeticOverflow("sub", a, b)
    return a - b


def checked_mul(a: int, b: int, bits: int = UINT_BITS_DEFAULT) -> int:
    """
    a * b с проверкой переполнения.

    Используется для price * amount при проверке порога оплаты.
    """
    require_uint(a, "a", bits)
    require_uint(b, "b", bits)

    result = a * b
    if result > uint_max(bits):
        raise ArithmeticOverflow("mul", a, b)
    return result


def fits_uint(value: int, bits: int = UINT_BITS_DEFAULT) -> bool:
    """Проверка без exception: value — int в диапазоне [0, UINT_MAX]."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value <= uint_max(bits)
