"""Ledger — учёт уровней эмиссии (supply / minted / price)."""

from .tier_ledger import TierLedger

__all__ = ["TierLedger"]
