# visionboard_imaging/services/prompting/base_strategy.py
from abc import ABC, abstractmethod

from visionboard_imaging.data.constants import SynthesisStrategy
from visionboard_imaging.dto.synthesis import BuiltRequest, SynthesisRequest


class PromptStrategy(ABC):
    """
    Abstract base class for a prompt construction strategy.
    Implementations must be pure: the same request always yields an equal body.
    """

    strategy: SynthesisStrategy

    @abstractmethod
    def build(self, request: SynthesisRequest) -> BuiltRequest:
        """
        Creates the `generate_content` contents and generation config for a request.
        """
        raise NotImplementedError
