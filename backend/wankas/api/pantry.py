"""
API endpoints for the AI pantry assistant ("Mi Despensa")

Endpoints:
- POST /api/v1/pantry/identify         - Identify food in uploaded photos
- POST /api/v1/pantry/recipes          - Suggest recipes for the identified items
- POST /api/v1/pantry/recipes/details  - Missing ingredients, catalog matches and image
- POST /api/v1/pantry/recipes/scale    - Rescale ingredients to other servings
- POST /api/v1/pantry/recipes/image    - Generate a dish image

All endpoints require a signed-in user.

Author: Wanka's
Date: 2025-06-05
"""
import logging
from typing import List, Union

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from wankas.core.auth import TokenUser, get_current_user
from wankas.core.config import settings
from wankas.core.errors import WankasError, UploadValidationError, ValidationError, to_http_exception
from wankas.core.i18n import get_locale
from wankas.core.rate_limit import endpoint_rate_limit
from wankas.domain.recipe import Recipe, IdentifiedItem, IngredientActionItem, scale_recipe_ingredients
from wankas.services.pantry_ai_service import PantryImage, SUPPORTED_IMAGE_TYPES
from wankas.services.pantry_service import get_pantry_service

logger = logging.getLogger(__name__)

# ============================================================================
# ROUTER
# ============================================================================

router = APIRouter(prefix="/api/v1/pantry", tags=["Pantry"])


# ============================================================================
# REQUEST MODELS
# ============================================================================

class RecipesRequest(BaseModel):
    ingredients: List[str] = Field(default_factory=list, description="Identified item names")


class RecipeDetailsRequest(BaseModel):
    recipe: Recipe
    available_ingredients: List[str] = Field(default_factory=list)
    desired_servings: int = Field(1, ge=1, le=100)
    include_image: bool = True


class ScaleRequest(BaseModel):
    recipe: Recipe
    desired_servings: int = Field(..., ge=1, le=100)


class RecipeImageRequest(BaseModel):
    recipe_name: str = Field(..., min_length=1, max_length=200)


def _action_item_dict(item: Union[IdentifiedItem, IngredientActionItem]) -> dict:
    data = item.model_dump(exclude={"db_product"})
    data["db_product"] = item.db_product.to_dict() if item.db_product else None
    return data


async def read_pantry_images(files: List[UploadFile]) -> List[PantryImage]:
    """
    Validate uploads and read them into memory

    Raises:
        UploadValidationError: no files, too many, wrong type or too large
    """
    if not files:
        raise UploadValidationError("no_files")
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise UploadValidationError("max_files", max_files=settings.MAX_UPLOAD_FILES)

    max_bytes = settings.MAX_UPLOAD_FILE_MB * 1024 * 1024
    images = []
    for upload in files:
        media_type = (upload.content_type or "").lower()
        if media_type not in SUPPORTED_IMAGE_TYPES:
            raise UploadValidationError("invalid_file_type")
        data = await upload.read()
        if len(data) > max_bytes:
            raise UploadValidationError("file_too_large", max_size=settings.MAX_UPLOAD_FILE_MB)
        images.append(PantryImage(media_type=media_type, data=data))
    return images


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/identify", dependencies=[Depends(endpoint_rate_limit(10))])
async def identify(
    files: List[UploadFile] = File(..., description="1 to 5 food photos"),
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """
    Identify the food items in the photos

    Each item comes with its catalog match (if any) and a default
    quantity of 1 to add to the cart.
    """
    try:
        images = await read_pantry_images(files)
        # Blocking Claude call, run in the threadpool
        items = await run_in_threadpool(get_pantry_service().identify, images)
        logger.info(f"User {current_user.id} identified {len(items)} items")
        return {
            "status": "success",
            "count": len(items),
            "data": [_action_item_dict(item) for item in items]
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error identifying food items: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error identifying food items: {str(e)}")


@router.post("/recipes", dependencies=[Depends(endpoint_rate_limit(20))])
def suggest_recipes(
    body: RecipesRequest,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """1 to 3 recipes, Peruvian first; an empty list when the model has none"""
    try:
        ingredients = [name.strip() for name in body.ingredients if name and name.strip()]
        if not ingredients:
            raise ValidationError("no_items_for_recipe")

        recipes = get_pantry_service().suggest_recipes(ingredients)
        return {
            "status": "success",
            "count": len(recipes),
            "data": [recipe.model_dump() for recipe in recipes]
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error suggesting recipes: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error suggesting recipes: {str(e)}")


@router.post("/recipes/details", dependencies=[Depends(endpoint_rate_limit(20))])
def recipe_details(
    body: RecipeDetailsRequest,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    """
    Recipe view data: scaled ingredients, missing and available
    ingredients matched to the catalog, and a dish image

    A failed image or missing-ingredient lookup is reported in
    `image_error` / `missing_ingredients_error` instead of failing.
    """
    try:
        details = get_pantry_service().recipe_details(
            recipe=body.recipe,
            available=body.available_ingredients,
            desired_servings=body.desired_servings,
            include_image=body.include_image
        )
        return {
            "status": "success",
            "data": {
                **details,
                "recipe": details["recipe"].model_dump(),
                "missing_ingredients": [_action_item_dict(i) for i in details["missing_ingredients"]],
                "available_ingredients": [_action_item_dict(i) for i in details["available_ingredients"]],
            }
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error building recipe details: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error building recipe details: {str(e)}")


@router.post("/recipes/scale")
async def scale_recipe(
    body: ScaleRequest,
    current_user: TokenUser = Depends(get_current_user)
):
    """Ingredient lines rescaled from the recipe's servings to desired_servings"""
    return {
        "status": "success",
        "data": {
            "original_servings": body.recipe.servings,
            "desired_servings": body.desired_servings,
            "ingredients": scale_recipe_ingredients(body.recipe, body.desired_servings)
        }
    }


@router.post("/recipes/image", dependencies=[Depends(endpoint_rate_limit(10))])
def recipe_image(
    body: RecipeImageRequest,
    current_user: TokenUser = Depends(get_current_user),
    locale: str = Depends(get_locale)
):
    try:
        image_data_uri = get_pantry_service().generate_image(body.recipe_name)
        return {
            "status": "success",
            "data": {"image_data_uri": image_data_uri}
        }

    except WankasError as e:
        raise to_http_exception(e, locale)
    except Exception as e:
        logger.error(f"Error generating recipe image: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating recipe image: {str(e)}")
