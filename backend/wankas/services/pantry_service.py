"""
Pantry Service
Ties the AI answers to the catalog for the "Mi Despensa" flow

Steps the client goes through:
1. identify food in photos          -> IdentifiedItem list
2. suggest recipes for those items  -> Recipe list
3. open one recipe                  -> scaled ingredients, missing and
                                       available ingredients matched to
                                       products, optional dish image
4. change servings                  -> rescaled ingredient lines

Author: Wanka's
Date: 2025-06-05
"""
import logging
from typing import Callable, List, Optional

from wankas.core.errors import WankasError
from wankas.domain.product import Product
from wankas.domain.recipe import (
    Recipe,
    IdentifiedItem,
    IngredientActionItem,
    capitalize_first_letter,
    filter_missing_ingredients,
    scale_recipe_ingredients,
)
from wankas.repositories.product_repository import ProductRepository
from wankas.services.pantry_ai_service import PantryAIService, PantryImage, get_pantry_ai_service
from wankas.services.product_matching import find_product_match
from wankas.services.recipe_image_service import RecipeImageService, get_recipe_image_service

logger = logging.getLogger(__name__)


class PantryService:
    """Pantry assistant orchestration"""

    def __init__(
        self,
        ai_service_factory: Callable[[], PantryAIService] = get_pantry_ai_service,
        image_service_factory: Callable[[], RecipeImageService] = get_recipe_image_service,
        product_repository: Optional[ProductRepository] = None
    ):
        # Factories so a missing API key only fails the endpoint that needs it
        self._ai_service_factory = ai_service_factory
        self._image_service_factory = image_service_factory
        self.product_repository = product_repository or ProductRepository()

    def _catalog(self) -> List[Product]:
        return self.product_repository.find_all()

    def identify(self, images: List[PantryImage]) -> List[IdentifiedItem]:
        """Identify food in the photos and match each name to the catalog"""
        names = self._ai_service_factory().identify_food_items(images)
        if not names:
            return []

        catalog = self._catalog()
        return [
            IdentifiedItem(
                name=capitalize_first_letter(name),
                ai_original_name=name,
                db_product=find_product_match(name, catalog),
                quantity_to_add_to_cart=1,
            )
            for name in names
        ]

    def suggest_recipes(self, ingredients: List[str]) -> List[Recipe]:
        return self._ai_service_factory().suggest_recipes(ingredients)

    def missing_ingredients(
        self,
        recipe_name: str,
        available: List[str],
        catalog: Optional[List[Product]] = None
    ) -> List[IngredientActionItem]:
        """AI missing ingredients, filtered and matched to the catalog"""
        raw = self._ai_service_factory().suggest_missing_ingredients(recipe_name, available)
        names = filter_missing_ingredients(raw, available)
        if catalog is None:
            catalog = self._catalog()
        return [
            IngredientActionItem(
                ai_name=capitalize_first_letter(name),
                db_product=find_product_match(name, catalog),
                quantity_to_add_to_cart=1,
            )
            for name in names
        ]

    def available_ingredients(self, available: List[str], catalog: List[Product]) -> List[IngredientActionItem]:
        """Pantry items that exist in the catalog, so the user can restock them"""
        result = []
        for name in available:
            product = find_product_match(name, catalog)
            if product is not None:
                result.append(IngredientActionItem(ai_name=name, db_product=product, quantity_to_add_to_cart=1))
        return result

    def generate_image(self, recipe_name: str) -> str:
        return self._image_service_factory().generate_recipe_image(recipe_name)

    def recipe_details(
        self,
        recipe: Recipe,
        available: List[str],
        desired_servings: int = 1,
        include_image: bool = True
    ) -> dict:
        """
        Everything the recipe view needs in one call

        Missing-ingredient and image failures are reported in the result
        instead of failing the whole call.
        """
        catalog = self._catalog()

        missing: List[IngredientActionItem] = []
        missing_error = None
        try:
            missing = self.missing_ingredients(recipe.recipe_name, available, catalog)
        except WankasError as e:
            logger.error(f"Missing ingredients failed for {recipe.recipe_name!r}: {e}")
            missing_error = e.key

        image_data_uri = None
        image_error = None
        if include_image:
            try:
                image_data_uri = self.generate_image(recipe.recipe_name)
            except WankasError as e:
                logger.warning(f"Recipe image failed for {recipe.recipe_name!r}: {e}")
                image_error = e.key

        return {
            "recipe": recipe,
            "desired_servings": desired_servings,
            "scaled_ingredients": scale_recipe_ingredients(recipe, desired_servings),
            "missing_ingredients": missing,
            "available_ingredients": self.available_ingredients(available, catalog),
            "image_data_uri": image_data_uri,
            "missing_ingredients_error": missing_error,
            "image_error": image_error,
        }


_service_instance: Optional[PantryService] = None


def get_pantry_service() -> PantryService:
    global _service_instance
    if _service_instance is None:
        _service_instance = PantryService()
    return _service_instance
