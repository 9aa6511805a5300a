"""
Relay Module

Usage:
    from babelroom.services.relay import RelayOrchestrator, RelayResult
"""
from .models import RelayResult, TranslationOutcome, Utterance
from .orchestrator import RelayOrchestrator

__all__ = [
    "RelayOrchestrator",
    "RelayResult",
    "TranslationOutcome",
    "Utterance",
]
