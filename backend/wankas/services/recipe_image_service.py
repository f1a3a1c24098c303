"""
Recipe image generation (Gemini)

Generates a photorealistic picture of a dish and returns it as a
`data:` URI the client can show directly.
"""
import base64
import logging
from typing import Optional

from google import genai
from google.genai.errors import APIError

from wankas.core.config import settings
from wankas.core.errors import RecipeImageError

logger = logging.getLogger(__name__)

IMAGE_PROMPT = (
    'Genera una imagen fotorrealista de alta calidad de un plato de "{recipe_name}". '
    "La imagen debe ser apetitosa, bien iluminada y visualmente atractiva, "
    "adecuada para un blog de cocina."
)


class RecipeImageService:
    """Wraps the Gemini image model"""

    def __init__(self, client: Optional[genai.Client] = None):
        if client is None:
            if not settings.GEMINI_API_KEY:
                raise RecipeImageError("ai_not_configured")
            client = genai.Client(api_key=settings.GEMINI_API_KEY)
        self.client = client
        self.model = settings.RECIPE_IMAGE_MODEL

    def generate_recipe_image(self, recipe_name: str) -> str:
        """
        Generate a dish picture for a recipe

        Returns:
            'data:<mime>;base64,<data>'

        Raises:
            RecipeImageError: API failure or no image in the answer
        """
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=IMAGE_PROMPT.format(recipe_name=recipe_name),
                config=genai.types.GenerateContentConfig(
                    response_modalities=["TEXT", "IMAGE"]
                )
            )
        except APIError as e:
            logger.error(f"Gemini API error generating image for {recipe_name!r}: {e}")
            raise RecipeImageError("recipe_image_failed") from e

        for candidate in response.candidates or []:
            content = candidate.content
            for part in (content.parts if content else None) or []:
                inline = part.inline_data
                if inline is not None and inline.data:
                    mime_type = inline.mime_type or "image/png"
                    encoded = base64.b64encode(inline.data).decode("ascii")
                    logger.info(f"Generated {mime_type} image for {recipe_name!r}")
                    return f"data:{mime_type};base64,{encoded}"

        logger.error(f"Gemini returned no image for {recipe_name!r}")
        raise RecipeImageError("recipe_image_failed")


_service_instance: Optional[RecipeImageService] = None


def get_recipe_image_service() -> RecipeImageService:
    global _service_instance
    if _service_instance is None:
        _service_instance = RecipeImageService()
    return _service_instance
