"""Image backend interface for bot_lanes."""

from typing import ClassVar, Protocol, runtime_checkable

__all__ = [
    "ImageGeneratorInterface",
]


@runtime_checkable
class ImageGeneratorInterface(Protocol):
    """Contract for prompt-to-image backends."""

    config_class: ClassVar[type | None] = None

    async def generate(self, prompt: str) -> bytes:
        """Render an image for a prompt.

        Args:
            prompt: Free-form image description

        Returns:
            Encoded image bytes

        Raises:
            ImageGenerationError: If the backend fails or returns nothing
        """
        ...
