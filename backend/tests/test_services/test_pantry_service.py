"""
Unit tests for PantryService orchestration
"""
from unittest.mock import MagicMock

import pytest

from wankas.core.errors import PantryAIError, RecipeImageError
from wankas.domain.recipe import Recipe
from wankas.services.pantry_ai_service import PantryImage
from wankas.services.pantry_service import PantryService


@pytest.fixture
def ai():
    return MagicMock()


@pytest.fixture
def images():
    return MagicMock()


@pytest.fixture
def service(ai, images, catalog):
    repo = MagicMock()
    repo.find_all.return_value = catalog
    return PantryService(
        ai_service_factory=lambda: ai,
        image_service_factory=lambda: images,
        product_repository=repo,
    )


@pytest.fixture
def recipe():
    return Recipe(
        recipe_name="Ají de Gallina",
        servings=4,
        ingredients=["1 pollo entero", "4 ajíes amarillos", "1 taza de leche evaporada"],
        preparation_steps=["Sancochar el pollo."],
    )


class TestIdentify:
    def test_names_are_capitalized_and_matched(self, service, ai):
        ai.identify_food_items.return_value = ["cebolla roja", "quinua"]

        items = service.identify([PantryImage("image/jpeg", b"x")])

        assert [item.name for item in items] == ["Cebolla roja", "Quinua"]
        assert items[0].ai_original_name == "cebolla roja"
        assert items[0].db_product.id == "p-cebolla"
        assert items[1].db_product is None
        assert all(item.quantity_to_add_to_cart == 1 for item in items)

    def test_nothing_identified(self, service, ai):
        ai.identify_food_items.return_value = []

        assert service.identify([PantryImage("image/jpeg", b"x")]) == []
        service.product_repository.find_all.assert_not_called()


class TestMissingIngredients:
    def test_filtered_and_matched(self, service, ai):
        ai.suggest_missing_ingredients.return_value = ["pollo", "cebolla", "Papa a la huancaína", "ají amarillo", ""]

        result = service.missing_ingredients("Ají de Gallina", ["Cebolla"])

        assert [item.ai_name for item in result] == ["Pollo", "Ají amarillo"]
        assert [item.db_product.id for item in result] == ["p-pollo", "p-aji"]

    def test_available_ingredients_keep_only_catalog_items(self, service, catalog):
        result = service.available_ingredients(["Cebolla", "quinua"], catalog)

        assert [(item.ai_name, item.db_product.id) for item in result] == [("Cebolla", "p-cebolla")]


class TestRecipeDetails:
    def test_full_details(self, service, ai, images, recipe):
        ai.suggest_missing_ingredients.return_value = ["leche evaporada"]
        images.generate_recipe_image.return_value = "data:image/png;base64,AAA="

        details = service.recipe_details(recipe, ["Pollo"], desired_servings=2)

        assert details["scaled_ingredients"] == ["0.5 pollo entero", "2 ajíes amarillos", "0.5 taza de leche evaporada"]
        assert details["missing_ingredients"][0].db_product.id == "p-leche"
        assert details["available_ingredients"][0].db_product.id == "p-pollo"
        assert details["image_data_uri"] == "data:image/png;base64,AAA="
        assert details["missing_ingredients_error"] is None
        assert details["image_error"] is None
        # The catalog is read once for both lists
        service.product_repository.find_all.assert_called_once()

    def test_partial_failures_are_reported(self, service, ai, images, recipe):
        ai.suggest_missing_ingredients.side_effect = PantryAIError("missing_ingredients_failed")
        images.generate_recipe_image.side_effect = RecipeImageError("recipe_image_failed")

        details = service.recipe_details(recipe, [], desired_servings=4)

        assert details["missing_ingredients"] == []
        assert details["missing_ingredients_error"] == "missing_ingredients_failed"
        assert details["image_data_uri"] is None
        assert details["image_error"] == "recipe_image_failed"
        assert details["scaled_ingredients"] == recipe.ingredients

    def test_image_can_be_skipped(self, service, ai, images, recipe):
        ai.suggest_missing_ingredients.return_value = []

        details = service.recipe_details(recipe, [], include_image=False)

        images.generate_recipe_image.assert_not_called()
        assert details["image_data_uri"] is None
