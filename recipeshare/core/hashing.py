import hashlib
import json
from typing import Any, Dict

# Fields that make up a recipe's content. Ownership, memberships and audit
# fields are not part of it.
CONTENT_FIELDS = ("title", "description", "ingredients", "instructions", "category", "image")


def recipe_content(source: Any) -> Dict[str, Any]:
    """
    Extracts the content fields from either a dict (validated payload dump)
    or an ORM recipe, so both sides of a comparison look the same.
    """
    if isinstance(source, dict):
        return {field: source.get(field) for field in CONTENT_FIELDS}
    return {field: getattr(source, field, None) for field in CONTENT_FIELDS}


def calculate_recipe_checksum(recipe_data: Dict[str, Any]) -> str:
    """
    SHA256 over the canonical JSON form of the recipe content.
    Keys are sorted; list order is preserved, so reordering ingredients or
    instructions counts as a change.
    """
    serialized = json.dumps(
        recipe_content(recipe_data), sort_keys=True, default=str, ensure_ascii=True
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()
