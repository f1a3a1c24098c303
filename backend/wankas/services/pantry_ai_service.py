"""
Pantry AI Service

Integrates with Claude (Anthropic) for the pantry assistant:
- Food identification from one or more photos (vision)
- Recipe suggestions from the identified ingredients (Peruvian first)
- Missing ingredients for a chosen recipe

Prompts are in Spanish and ask for a single JSON object; the answer is
validated with pydantic before it reaches the rest of the app.

Author: Wanka's
Date: 2025-06-05
"""
import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import anthropic
from pydantic import BaseModel, Field, ConfigDict

from wankas.core.config import settings
from wankas.core.errors import PantryAIError
from wankas.domain.recipe import Recipe

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION
# ============================================================================

MAX_TOKENS = 4096

IDENTIFY_TEMPERATURE = 0.1
RECIPES_TEMPERATURE = 0.5
MISSING_INGREDIENTS_TEMPERATURE = 0.2

# Image types the vision model accepts
SUPPORTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


IDENTIFY_INSTRUCTION = """Eres un experto identificador de alimentos. Se te proporcionarán una o más imágenes.
Tu tarea es analizar CADA UNA de las siguientes imágenes. Identifica TODOS los alimentos visibles en TODAS las imágenes proporcionadas.
Devuelve los nombres de los alimentos exclusivamente en ESPAÑOL.
Combina todos los alimentos identificados en una ÚNICA lista en el campo "items".
Debes devolver SOLAMENTE un objeto JSON con la forma {"items": ["...", "..."]}. No incluyas ningún texto adicional antes o después del JSON.
Analiza las siguientes imágenes:"""


RECIPES_PROMPT = """Eres un experto chef especializado en cocina peruana e internacional.
Tu tarea es sugerir recetas detalladas basadas en la siguiente lista de ingredientes disponibles, de preferencia recetas peruanas.
Debes responder COMPLETAMENTE EN ESPAÑOL.

Ingredientes disponibles:
{ingredients}

Instrucciones:
1. Analiza los ingredientes proporcionados.
2. Sugiere entre 1 y 3 recetas.
3. PRIORIZA recetas de la COCINA PERUANA. Si no es posible encontrar una receta peruana adecuada con los ingredientes, puedes sugerir recetas internacionales populares.
4. Para cada receta sugerida, proporciona:
   a. "recipeName": El nombre completo de la receta en español.
   b. "servings": Un NÚMERO entero que indique para cuántas personas está originalmente pensada la receta (ej: 2, 4).
   c. "ingredients": Lista de TODOS los ingredientes necesarios. Cada ingrediente debe comenzar con una CANTIDAD NUMÉRICA clara cuando sea posible (ej: "2 papas amarillas", "0.5 taza de ají", "100 gramos de carne").
   d. "preparationSteps": Los pasos de preparación en orden lógico.
5. Devuelve SOLAMENTE un objeto JSON con la forma {{"recipes": [...]}}, sin markdown ni texto adicional.

Ejemplo de UNA receta:
{{
  "recipeName": "Lomo Saltado",
  "servings": 4,
  "ingredients": [
    "500 gramos de lomo de res, cortado en tiras",
    "1 cebolla roja grande, cortada en juliana gruesa",
    "2 tomates, cortados en gajos",
    "0.25 taza de sillao (salsa de soja)",
    "Sal y pimienta al gusto"
  ],
  "preparationSteps": [
    "Sazona la carne con sal y pimienta.",
    "Saltea la carne a fuego alto hasta dorarla. Retira y reserva.",
    "Saltea la cebolla y el tomate, vuelve a agregar la carne y el sillao.",
    "Sirve con papas fritas y arroz blanco."
  ]
}}"""


MISSING_INGREDIENTS_PROMPT = """Eres un asistente de cocina experto en identificar ingredientes faltantes para una receta específica, basándote en una lista de ingredientes que el usuario ya tiene.
Lista ÚNICAMENTE nombres de ingredientes alimenticios CONCRETOS, TANGIBLES y COMPRABLES que falten para completar la receta.

Receta: {recipe}

Ingredientes disponibles:
{available}

Instrucciones importantes:
1. Identifica qué ingredientes CLAVE de la receta NO están en la lista de ingredientes disponibles.
2. Cada elemento debe ser un SUSTANTIVO que represente un alimento o condimento específico (ej: "pollo", "ají amarillo", "leche evaporada", "comino").
3. NO incluyas cantidades, adjetivos o frases descriptivas ("picado", "al gusto"), métodos de cocción ("al horno", "a la peruana") ni ingredientes que ya están disponibles.
4. Si no falta nada esencial, devuelve una lista vacía.
5. Devuelve SOLAMENTE un objeto JSON con la forma {{"missingIngredients": ["..."]}}."""


# ============================================================================
# OUTPUT SCHEMAS
# ============================================================================

class IdentifyFoodItemsOutput(BaseModel):
    items: List[str] = Field(default_factory=list)


class SuggestRecipesOutput(BaseModel):
    recipes: List[Dict[str, Any]] = Field(default_factory=list)


class MissingIngredientsOutput(BaseModel):
    missing_ingredients: List[str] = Field(default_factory=list, alias="missingIngredients")

    model_config = ConfigDict(populate_by_name=True)


@dataclass
class PantryImage:
    """An uploaded photo ready for the vision model"""
    media_type: str
    data: bytes

    @property
    def base64_data(self) -> str:
        return base64.standard_b64encode(self.data).decode("ascii")


_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def extract_json_object(text: str) -> dict:
    """
    Parse the JSON object in a model answer

    Tolerates markdown fences and text around the object.

    Raises:
        ValueError if no JSON object can be parsed
    """
    cleaned = _FENCE_RE.sub("", (text or "").strip())
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("No JSON object in model output")
    data = json.loads(cleaned[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("Model output is not a JSON object")
    return data


class PantryAIService:
    """
    Service for the AI pantry assistant using Claude.
    """

    def __init__(self, client: Optional[anthropic.Anthropic] = None):
        """Initialize the Claude client"""
        if client is None:
            api_key = settings.ANTHROPIC_API_KEY
            if not api_key:
                raise PantryAIError("ai_not_configured")
            client = anthropic.Anthropic(api_key=api_key)

        self.client = client
        self.model = settings.CLAUDE_MODEL
        logger.info(f"PantryAIService initialized with model: {self.model}")

    def _complete(self, content: List[Dict[str, Any]], temperature: float) -> str:
        """Single-turn call; returns the concatenated text blocks"""
        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            temperature=temperature,
            messages=[{"role": "user", "content": content}]
        )
        if getattr(response, "stop_reason", None) == "refusal":
            raise PantryAIError("ai_blocked")

        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        logger.debug(f"Claude answered {len(text)} chars (stop_reason={response.stop_reason})")
        return text

    # ========================================================================
    # Identification
    # ========================================================================

    def identify_food_items(self, images: List[PantryImage]) -> List[str]:
        """
        Identify every food item visible in the photos

        Returns:
            Food names in Spanish, as returned by the model

        Raises:
            PantryAIError: API failure, blocked request or unusable output
        """
        content: List[Dict[str, Any]] = [{"type": "text", "text": IDENTIFY_INSTRUCTION}]
        for image in images:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": image.base64_data,
                }
            })

        try:
            text = self._complete(content, IDENTIFY_TEMPERATURE)
        except anthropic.APIError as e:
            logger.error(f"Claude API error identifying food items: {e}")
            raise PantryAIError("identify_failed") from e

        try:
            output = IdentifyFoodItemsOutput.model_validate(extract_json_object(text))
        except ValueError as e:
            logger.error(f"Invalid identification output: {e}. Raw: {text[:300]}")
            raise PantryAIError("ai_invalid_output") from e

        items = [item.strip() for item in output.items if item and item.strip()]
        logger.info(f"Identified {len(items)} food items in {len(images)} images")
        return items

    # ========================================================================
    # Recipes
    # ========================================================================

    def suggest_recipes(self, ingredients: List[str]) -> List[Recipe]:
        """
        Suggest 1 to 3 recipes for the available ingredients

        Invalid or empty output gives an empty list; recipes that do not
        validate are skipped.

        Raises:
            PantryAIError: API failure or blocked request
        """
        if not ingredients:
            return []

        prompt = RECIPES_PROMPT.format(ingredients="\n".join(f"- {name}" for name in ingredients))
        try:
            text = self._complete([{"type": "text", "text": prompt}], RECIPES_TEMPERATURE)
        except anthropic.APIError as e:
            logger.error(f"Claude API error suggesting recipes: {e}")
            raise PantryAIError("recipes_failed") from e

        try:
            output = SuggestRecipesOutput.model_validate(extract_json_object(text))
        except ValueError as e:
            logger.warning(f"No usable recipes in model output: {e}")
            return []

        recipes = []
        for raw in output.recipes:
            try:
                recipes.append(Recipe.model_validate(raw))
            except ValueError as e:
                logger.warning(f"Skipping invalid recipe {raw.get('recipeName')!r}: {e}")

        if not recipes:
            logger.warning(f"The model returned no recipes for {ingredients}")
        return recipes

    # ========================================================================
    # Missing ingredients
    # ========================================================================

    def suggest_missing_ingredients(self, recipe_name: str, available: List[str]) -> List[str]:
        """
        Purchasable ingredients the recipe needs and the user lacks

        Returns the raw model list; filtering happens in PantryService.
        Invalid output gives an empty list.
        """
        available_text = "\n".join(f"- {name}" for name in available) if available else "- (Ninguno)"
        prompt = MISSING_INGREDIENTS_PROMPT.format(recipe=recipe_name, available=available_text)

        try:
            text = self._complete([{"type": "text", "text": prompt}], MISSING_INGREDIENTS_TEMPERATURE)
        except anthropic.APIError as e:
            logger.error(f"Claude API error suggesting missing ingredients: {e}")
            raise PantryAIError("missing_ingredients_failed") from e

        try:
            output = MissingIngredientsOutput.model_validate(extract_json_object(text))
        except ValueError as e:
            logger.warning(f"No usable missing ingredients for {recipe_name!r}: {e}")
            return []
        return output.missing_ingredients


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

_service_instance: Optional[PantryAIService] = None


def get_pantry_ai_service() -> PantryAIService:
    """
    Get the singleton pantry AI service instance.

    Returns:
        PantryAIService instance
    """
    global _service_instance
    if _service_instance is None:
        _service_instance = PantryAIService()
    return _service_instance
