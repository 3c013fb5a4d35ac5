"""Token — fungible-balance ledger одного создателя."""

from .fungible import MintAuthority, TokenInstance

__all__ = ["MintAuthority", "TokenInstance"]
