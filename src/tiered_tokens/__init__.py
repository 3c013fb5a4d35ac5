"""
tiered-tokens — движок эмиссии токенов создателей по ценовым уровням

Каждый создатель владеет ровно одной линией токена; токены продаются
уровнями с фиксированным supply и ценой за единицу.
"""

from tiered_tokens.config import EngineConfig, LogConfig
from tiered_tokens.issuance import IssuanceOrchestrator, MintReceipt

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "LogConfig",
    "IssuanceOrchestrator",
    "MintReceipt",
    "__version__",
]
