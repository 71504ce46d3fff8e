# recipe_app/services/normalize.py
# Webhook response normalization.
# The workflow engine is user-configured, so its final node may emit any of several
# JSON shapes. Each shape is an ordered matcher; the first one that finds a payload wins.

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from recipe_app.db.models.recipe import CanonicalRecipe, RecipeTranslation
from recipe_app.db.models.schemas import RecipeRequestIn

log = logging.getLogger(__name__)

Matcher = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]

DIRECT_FIELDS = ("title", "ingredients", "instructions")

DEFAULT_INSTRUCTIONS = [
    "Prepare and measure all ingredients.",
    "Cook the ingredients together until done, seasoning to taste.",
    "Serve warm.",
]

BULLET_RE = re.compile(r"^\s*(?:[-•*]|\d+[.)](?!\d))\s*")


class WebhookResponseError(Exception):
    """Upstream body could not be turned into a payload."""


class EmptyResponse(WebhookResponseError):
    pass


class InvalidJson(WebhookResponseError):
    pass


class MissingRecipeData(WebhookResponseError):
    def __init__(self, keys: Sequence[str], payload_key: str = "recipe"):
        self.keys = list(keys)
        super().__init__(f"response is missing {payload_key} data (keys: {self.keys})")


# ------------------------------
# matchers
# ------------------------------

def _nested(obj: Any, *path: str) -> Optional[Dict[str, Any]]:
    for k in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(k)
    return obj if isinstance(obj, dict) and obj else None


def _success_wrapped(key: str) -> Matcher:
    def match(obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not obj.get("success"):
            return None
        return _nested(obj, key)
    return match


def _wrapped(key: str) -> Matcher:
    def match(obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _nested(obj, key)
    return match


def _data_wrapped(key: str) -> Matcher:
    def match(obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return _nested(obj, "data", key)
    return match


def _present(v: Any) -> bool:
    # empty lists still count; to_canonical_recipe fills them in
    return isinstance(v, (list, dict)) or bool(v)


def _direct(obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if all(_present(obj.get(k)) for k in DIRECT_FIELDS):
        return obj
    return None


def matchers_for(key: str) -> Tuple[Matcher, ...]:
    return (_success_wrapped(key), _wrapped(key), _data_wrapped(key), _direct)


RECIPE_MATCHERS = matchers_for("recipe")
TRANSLATION_MATCHERS = matchers_for("translation")


# ------------------------------
# parsing
# ------------------------------

def parse_webhook_body(text: Optional[str]) -> Any:
    if text is None or not text.strip():
        raise EmptyResponse("webhook returned an empty body")
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidJson(f"webhook returned invalid JSON: {e.msg}") from e

    # workflow engines often wrap a single item in an array
    if isinstance(parsed, list):
        if not parsed:
            raise EmptyResponse("webhook returned an empty array")
        parsed = parsed[0]
    return parsed


def extract_payload(
    text: Optional[str],
    matchers: Sequence[Matcher] = RECIPE_MATCHERS,
    payload_key: str = "recipe",
) -> Dict[str, Any]:
    obj = parse_webhook_body(text)
    if not isinstance(obj, dict):
        raise MissingRecipeData([], payload_key)

    for match in matchers:
        found = match(obj)
        if found:
            return found

    log.warning("webhook payload without %s data, keys=%s", payload_key, list(obj.keys()))
    raise MissingRecipeData(list(obj.keys()), payload_key)


def extract_recipe_payload(text: Optional[str]) -> Dict[str, Any]:
    return extract_payload(text, RECIPE_MATCHERS, "recipe")


def extract_translation_payload(text: Optional[str]) -> Dict[str, Any]:
    return extract_payload(text, TRANSLATION_MATCHERS, "translation")


# ------------------------------
# canonical record
# ------------------------------

def _text(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def _lines(v: Any) -> List[str]:
    # list, or a newline-separated string with optional bullets
    if isinstance(v, str):
        v = [BULLET_RE.sub("", line) for line in v.splitlines()]
    if not isinstance(v, list):
        return []
    out: List[str] = []
    for item in v:
        if isinstance(item, (int, float)) and not isinstance(item, bool):
            item = str(item)
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
    return out


def _minutes(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, str):
        m = re.search(r"\d+", v)
        v = m.group(0) if m else None
    try:
        n = int(float(v))
    except (TypeError, ValueError, OverflowError):
        return None
    return n if n >= 0 else None


def fallback_title(request: RecipeRequestIn) -> str:
    main = request.ingredients[0].title() if request.ingredients else "Mixed Vegetable"
    return f"{request.cuisine or 'Homestyle'} {main} Recipe"


def to_canonical_recipe(payload: Dict[str, Any], request: RecipeRequestIn) -> CanonicalRecipe:
    """
    Matched upstream payload → canonical record.
    Lists are never empty: request ingredients / generic steps fill the gaps.
    """
    ingredients = _lines(payload.get("ingredients")) or list(request.ingredients)
    instructions = _lines(payload.get("instructions") or payload.get("steps")) or list(DEFAULT_INSTRUCTIONS)
    tips = _text(payload.get("tips")) or None

    return CanonicalRecipe(
        title=_text(payload.get("title")) or fallback_title(request),
        description=_text(payload.get("description")),
        ingredients=ingredients,
        instructions=instructions,
        prepTime=_minutes(payload.get("prepTime")),
        cookTime=_minutes(payload.get("cookTime")),
        tips=tips,
    )


def to_translation(payload: Dict[str, Any], source: Dict[str, Any]) -> RecipeTranslation:
    return RecipeTranslation(
        title=_text(payload.get("title")) or source.get("title") or "",
        ingredients=_lines(payload.get("ingredients")) or list(source.get("ingredients") or []),
        instructions=_lines(payload.get("instructions")) or list(source.get("instructions") or []),
    )
