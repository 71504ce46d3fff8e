# recipe_app/services/prompts.py
# Prompt text sent to the workflow webhook and the chat model.

from recipe_app.db.models.schemas import RecipeRequestIn

SYSTEM_PROMPT = (
    "You are a professional chef who creates detailed, practical recipes. "
    "Always respond with valid JSON."
)

RESPONSE_FORMAT = """{
  "title": "Descriptive recipe name",
  "description": "Brief, appetizing description (2-3 sentences)",
  "ingredients": ["Exact ingredient with measurement (e.g., '2 cups diced chicken breast')", ...],
  "instructions": ["Step 1: Clear, specific instruction", "Step 2: ...", ...],
  "prepTime": numeric_minutes_for_preparation,
  "cookTime": numeric_minutes_for_cooking,
  "tips": "Helpful cooking tips and variations"
}"""


def build_recipe_prompt(req: RecipeRequestIn) -> str:
    restrictions = ", ".join(req.dietaryRestrictions) or "None"
    return (
        "Create a detailed, practical recipe with the following specifications:\n\n"
        f"AVAILABLE INGREDIENTS: {', '.join(req.ingredients)}\n"
        f"DIETARY RESTRICTIONS: {restrictions}\n"
        f"CUISINE STYLE: {req.cuisine or 'Any'}\n"
        f"NUMBER OF SERVINGS: {req.servings}\n"
        f"DIFFICULTY LEVEL: {req.difficulty}\n"
        f"MAXIMUM COOKING TIME: {req.cookingTime} minutes\n\n"
        "REQUIREMENTS:\n"
        "1. Use primarily the provided ingredients\n"
        "2. Create a recipe that can be completed within the time limit\n"
        "3. Match the specified difficulty level\n"
        "4. Respect all dietary restrictions\n"
        "5. Provide clear, step-by-step instructions\n"
        "6. Include preparation and cooking times\n\n"
        "RESPONSE FORMAT (must be valid JSON):\n"
        f"{RESPONSE_FORMAT}\n\n"
        "IMPORTANT: Respond ONLY with valid JSON. Do not include any text before or after the JSON."
    )
