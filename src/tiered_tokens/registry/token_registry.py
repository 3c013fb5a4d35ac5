"""
Token Registry — Реестр creator → token

Инварианты:
- не более одной записи на создателя
- запись создаётся один раз и никогда не перезаписывается и не удаляется
- create_token атомарен: либо токен создан и зарегистрирован, либо ничего
"""

import threading
from typing import Callable, Dict, Optional

from loguru import logger

from tiered_tokens.config import EngineConfig
from tiered_tokens.core.domain.events import TokenCreated, TokenEvent
from tiered_tokens.core.domain.identity import derive_token_address, require_identity
from tiered_tokens.core.errors import AlreadyRegistered, TokenNotFound
from tiered_tokens.token.fungible import MintAuthority, TokenInstance


class TokenRegistry:
    """Реестр токенов создателей.

    Токены создаются с minter = MintAuthority движка: mint/burn доступны
    только владельцу этого объекта, который проверяет владение по реестру.
    Идентичность движка не может зарегистрироваться создателем.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        emit: Optional[Callable[[TokenEvent], object]] = None,
        authority: Optional[MintAuthority] = None,
    ):
        """
        Args:
            config: конфигурация движка
            emit: приёмник событий (TokenCreated и события токенов)
            authority: право mint/burn создаваемых токенов
                (default: новый MintAuthority(config.engine_identity))
        """
        self.config = config or EngineConfig()
        self._emit = emit
        self._authority = authority or MintAuthority(self.config.engine_identity)

        self._by_creator: Dict[str, str] = {}
        self._tokens: Dict[str, TokenInstance] = {}
        self._nonce = 0
        self._lock = threading.RLock()

    def create_token(self, name: str, symbol: str, caller: str) -> str:
        """
        Регистрация нового токена для caller.

        Args:
            name: название токена
            symbol: тикер
            caller: идентичность создателя

        Returns:
            Адрес созданного токена

        Raises:
            AlreadyRegistered: Если у caller уже есть токен
            ValueError: Если name/symbol/caller пустые или caller — движок
        """
        require_identity(caller, "caller")
        if caller == self._authority.identity:
            raise ValueError("caller cannot be the engine identity")

        with self._lock:
            existing = self._by_creator.get(caller)
            if existing is not None:
                raise AlreadyRegistered(caller, existing)

            address = derive_token_address(self.config.engine_identity, self._nonce + 1)
            if address in self._tokens:
                raise RuntimeError(f"token address collision: {address}")

            instance = TokenInstance(
                address=address,
                name=name,
                symbol=symbol,
                creator=caller,
                minter=self._authority,
                decimals=self.config.token_decimals,
                bits=self.config.uint_bits,
                emit=self._emit,
            )
            event = TokenCreated(token=address, creator=caller, name=name, symbol=symbol)

            self._by_creator[caller] = address
            self._tokens[address] = instance
            self._nonce += 1
            try:
                if self._emit is not None:
                    self._emit(event)
            except BaseException:
                del self._by_creator[caller]
                del self._tokens[address]
                self._nonce -= 1
                raise

        logger.info("token created: creator={} token={} symbol={}", caller, address, symbol)
        return address

    def resolve(self, creator: str) -> Optional[str]:
        """Адрес токена создателя или None. Без побочных эффектов."""
        with self._lock:
            return self._by_creator.get(creator)

    def get_token(self, address: str) -> TokenInstance:
        """
        Raises:
            TokenNotFound: Если адрес не зарегистрирован
        """
        with self._lock:
            instance = self._tokens.get(address)
        if instance is None:
            raise TokenNotFound(address)
        return instance

    def owner_of(self, address: str) -> Optional[str]:
        """Создатель токена или None для неизвестного адреса."""
        with self._lock:
            instance = self._tokens.get(address)
        return instance.creator if instance is not None else None

    def __contains__(self, creator: object) -> bool:
        with self._lock:
            return creator in self._by_creator

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_creator)
