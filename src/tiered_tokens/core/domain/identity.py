"""
Identity — Идентификаторы участников и адреса токенов

Идентичность вызывающего — непрозрачная строка (address-like), которую
аутентифицирует внешнее окружение. Движок использует её только как ключ.
"""

import hashlib
from typing import Final

# Нулевой адрес: источник mint и получатель burn в Transfer событиях
ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

# Идентичность движка по умолчанию (единственный minter всех токенов)
ENGINE_IDENTITY_DEFAULT: Final[str] = "0x" + "0" * 38 + "01"


def require_identity(value: str, name: str = "identity") -> str:
    """
    Валидация идентичности.

    Raises:
        TypeError: Если value не str
        ValueError: Если value пустая строка или нулевой адрес
    """
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, got {type(value).__name__}")

    if not value.strip():
        raise ValueError(f"{name} must be non-empty")

    if value == ZERO_ADDRESS:
        raise ValueError(f"{name} cannot be the zero address")

    return value


def derive_token_address(deployer: str, nonce: int) -> str:
    """
    Детерминированный адрес нового токена.

    Адрес = первые 20 байт sha256(deployer:nonce) в hex.
    Один и тот же (deployer, nonce) всегда даёт один и тот же адрес.
    """
    digest = hashlib.sha256(f"{deployer}:{nonce}".encode("utf-8")).hexdigest()
    return "0x" + digest[:40]
