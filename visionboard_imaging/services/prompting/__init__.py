# visionboard_imaging/services/prompting/__init__.py
from .factory import get_ordered_strategies, get_prompt_strategy
from .identity_lock_strategy import IdentityLockStrategy
from .natural_strategy import NaturalLanguageStrategy
from .text_only import build_text_only_request

__all__ = [
    "IdentityLockStrategy",
    "NaturalLanguageStrategy",
    "build_text_only_request",
    "get_ordered_strategies",
    "get_prompt_strategy",
]
