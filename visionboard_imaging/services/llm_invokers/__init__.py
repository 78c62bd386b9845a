# visionboard_imaging/services/llm_invokers/__init__.py
from .image_invoker import ImageModelInvoker
from .likeness_validator import LikenessValidationError, LikenessValidator

__all__ = ["ImageModelInvoker", "LikenessValidationError", "LikenessValidator"]
