# backend/catalog/ranking.py
from typing import List, Optional, Sequence

from .models import Product


def sort_by_connection_score(products: Sequence[Product]) -> List[Product]:
    """Highest connection score first; products without a score count as 0.
    Ties keep catalog order."""
    return sorted(products, key=lambda p: p.connection_score or 0, reverse=True)


def search_products(products: Sequence[Product], query: Optional[str]) -> List[Product]:
    """Case-insensitive substring match on profile name, short description
    and product type name."""
    if not query or not query.strip():
        return list(products)
    needle = query.strip().lower()

    def _matches(p: Product) -> bool:
        haystacks = [
            p.profile.name,
            p.profile.description_short,
            p.product_type.name if p.product_type else None,
        ]
        return any(h and needle in h.lower() for h in haystacks)

    return [p for p in products if _matches(p)]


def rank_candidates(products: Sequence[Product], query: Optional[str] = None) -> List[Product]:
    return search_products(sort_by_connection_score(products), query)
