"""
Display helpers for the dashboard templates.

Nothing here holds state; each helper derives what a product card or the
comparison table shows from a stored Product.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from interfaces.productModels import Product, ProductIngredient

MAX_COMPARE_PRODUCTS = 4
INGREDIENT_PREVIEW_COUNT = 3

SAFETY_BADGE_CLASSES = {
    "safe": "badge-safe",
    "caution": "badge-caution",
    "warning": "badge-warning",
}
SAFETY_ICONS = {
    "safe": "✔",
    "caution": "⚠",
    "warning": "✖",
}
SAFETY_SCORES = {"safe": 5, "caution": 3, "warning": 1}
UNKNOWN_SAFETY_SCORE = 3


@dataclass(frozen=True)
class OverallSafety:
    rating: str
    css_class: str
    score: float


def safety_badge_class(rating: Optional[str]) -> str:
    return SAFETY_BADGE_CLASSES.get(rating, "badge-neutral")


def safety_icon(rating: Optional[str]) -> str:
    return SAFETY_ICONS.get(rating, SAFETY_ICONS["caution"])


def overall_safety(product: Product) -> OverallSafety:
    """Average the ingredient ratings (safe=5, caution=3, warning=1)."""
    scores = [SAFETY_SCORES.get(i.safety_rating, UNKNOWN_SAFETY_SCORE) for i in product.ingredients]
    if not scores:
        return OverallSafety(rating="Fair", css_class="text-fair", score=0.0)

    average = sum(scores) / len(scores)
    if average >= 4.5:
        return OverallSafety(rating="Excellent", css_class="text-excellent", score=average)
    if average >= 3.5:
        return OverallSafety(rating="Good", css_class="text-good", score=average)
    return OverallSafety(rating="Fair", css_class="text-fair", score=average)


def ingredient_preview(product: Product, limit: int = INGREDIENT_PREVIEW_COUNT) -> List[ProductIngredient]:
    return list(product.ingredients[:limit])


def hidden_ingredient_count(product: Product, limit: int = INGREDIENT_PREVIEW_COUNT) -> int:
    return max(0, len(product.ingredients) - limit)


def expiry_status(product: Product) -> str:
    return product.time_left or "Not specified"


def parse_compare_ids(raw: Optional[str], limit: int = MAX_COMPARE_PRODUCTS) -> List[int]:
    """Parse `?compare=1,2,3`; bad tokens and repeats are dropped, at most `limit` kept."""
    if not raw:
        return []
    ids = []
    for token in raw.split(","):
        token = token.strip()
        if not (token.isascii() and token.isdigit()):
            continue
        product_id = int(token)
        if product_id not in ids:
            ids.append(product_id)
        if len(ids) == limit:
            break
    return ids


def select_for_comparison(products: Iterable[Product], product_ids: List[int]) -> List[Product]:
    """Products for the comparison table, in the order they were selected."""
    by_id = {p.id: p for p in products}
    return [by_id[product_id] for product_id in product_ids if product_id in by_id]
