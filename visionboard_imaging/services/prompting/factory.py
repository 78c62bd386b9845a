# visionboard_imaging/services/prompting/factory.py
from visionboard_imaging.data.constants import SynthesisStrategy

from .base_strategy import PromptStrategy
from .identity_lock_strategy import IdentityLockStrategy
from .natural_strategy import NaturalLanguageStrategy

# Order matters: strategies are tried against each model in this order.
STRATEGY_MAP: dict[SynthesisStrategy, type[PromptStrategy]] = {
    SynthesisStrategy.MULTI_TURN_IDENTITY_LOCK: IdentityLockStrategy,
    SynthesisStrategy.SINGLE_TURN_NATURAL: NaturalLanguageStrategy,
}


def get_prompt_strategy(strategy: SynthesisStrategy) -> PromptStrategy:
    """
    Returns the prompt strategy implementation for an image-bearing strategy.
    """
    strategy_class = STRATEGY_MAP.get(strategy)
    if strategy_class is None:
        raise ValueError(f"No image-bearing prompt strategy for '{strategy.value}'")
    return strategy_class()


def get_ordered_strategies() -> list[PromptStrategy]:
    return [strategy_class() for strategy_class in STRATEGY_MAP.values()]
