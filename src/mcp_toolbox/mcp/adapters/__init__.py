"""
Adapters for calls that leave the process.

Each adapter owns the request/response shape of one remote provider and
reports failures as faults, so handlers stay free of transport details.
"""

from .image_adapter import GenerationState, ImageGenerationAdapter

__all__ = ["GenerationState", "ImageGenerationAdapter"]
