# recipe_app/services/mock_recipe.py
# Local template recipe, used when no webhook or LLM key is configured (demo deployments).

from typing import Any, Dict

from recipe_app.db.models.schemas import RecipeRequestIn


def generate_mock_recipe(req: RecipeRequestIn) -> Dict[str, Any]:
    main = req.ingredients[0] if req.ingredients else "Mixed vegetables"
    cuisine = req.cuisine or "International"

    if req.dietaryRestrictions:
        fits = " and ".join(req.dietaryRestrictions) + " dietary requirements"
    else:
        fits = "any dietary preferences"

    return {
        "title": f"{cuisine} {main} Delight",
        "description": (
            f"A delicious {req.difficulty} {cuisine.lower()} dish featuring "
            f"{main.lower()} and other fresh ingredients."
        ),
        "ingredients": [
            f"2 cups {main}",
            *[f"1 cup {ing}" for ing in req.ingredients[1:]],
            "2 cloves garlic, minced",
            "1 tbsp olive oil",
            "Salt and pepper to taste",
            "1 tsp herbs (oregano, thyme, or basil)",
        ],
        "instructions": [
            "Prep all ingredients by washing, chopping, and measuring.",
            "Heat olive oil in a large pan over medium heat.",
            "Add garlic and sauté for 1-2 minutes until fragrant.",
            f"Add {main} and cook for 5-7 minutes.",
            "Add remaining ingredients and cook until tender.",
            "Season with salt, pepper, and herbs to taste.",
            "Serve hot and enjoy!",
        ],
        "prepTime": max(10, int(req.cookingTime * 0.3)),
        "cookTime": max(15, int(req.cookingTime * 0.7)),
        "tips": f"For best results, ensure all ingredients are fresh. This recipe works well with {fits}.",
    }
