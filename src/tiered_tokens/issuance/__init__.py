"""Issuance — оркестратор эмиссии (входная поверхность движка)."""

from .orchestrator import IssuanceOrchestrator, MintReceipt, TokenAccount

__all__ = [
    "IssuanceOrchestrator",
    "MintReceipt",
    "TokenAccount",
]
