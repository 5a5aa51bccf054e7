from .interfaces import ChatPort, EmbeddingPort
from .models import FAIL_NOTE, PASS_NOTE, EvalCase, EvalResult

__all__ = [
    "ChatPort",
    "EmbeddingPort",
    "EvalCase",
    "EvalResult",
    "PASS_NOTE",
    "FAIL_NOTE",
]
