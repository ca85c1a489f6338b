# backend/compatibility/scoring.py
"""
Compatibility scoring engine

- Pairwise score between two catalog products:
  - shared chains (deployment targets), 10 points each, capped at 30
  - shared supported assets, 10 points each, capped at 30
- Stack score: rounded mean of every pairwise score, sorted into a tier

Pure functions, no I/O. Products with no deployments or assets simply score 0
on that side; nothing here raises for sparse catalog data.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..catalog.models import Product


POINTS_PER_MATCH = 10
MAX_CATEGORY_SCORE = 30
MAX_PAIR_SCORE = 2 * MAX_CATEGORY_SCORE

# A single pair counts as compatible from this score on.
PAIR_COMPATIBLE_THRESHOLD = 30

# Stack tiers, applied to the rounded mean of all pair scores.
STACK_COMPATIBLE_THRESHOLD = 30
STACK_PARTIAL_THRESHOLD = 10

TIER_COMPATIBLE = "compatible"
TIER_PARTIAL = "partial"
TIER_INCOMPATIBLE = "incompatible"

TIER_LABELS = {
    TIER_COMPATIBLE: "Highly Compatible",
    TIER_PARTIAL: "Partially Compatible",
    TIER_INCOMPATIBLE: "Low Compatibility",
}


class CompatibilityResult(BaseModel):
    pair_id: str
    product_a_id: str
    product_b_id: str
    score: int
    compatible: bool
    reasons: List[str] = Field(default_factory=list)
    shared_chains: List[str] = Field(default_factory=list)
    shared_assets: List[str] = Field(default_factory=list)


class StackScore(BaseModel):
    score: int
    tier: str
    label: str
    comparisons: int


# Scoring helpers

def _shared(left: Sequence[str], right: Sequence[str]) -> List[str]:
    """Items of `left` also in `right`, in `left` order, no repeats."""
    right_set = set(right)
    return [item for item in dict.fromkeys(left) if item in right_set]


def _category_score(matches: int) -> int:
    return min(MAX_CATEGORY_SCORE, POINTS_PER_MATCH * matches)


def _chain_similarity(p1: Product, p2: Product) -> Tuple[int, List[str], List[str]]:
    shared = _shared(p1.chain_ids, p2.chain_ids)
    explanations = [f"Shares {len(shared)} chain(s)"] if shared else []
    return _category_score(len(shared)), shared, explanations


def _asset_similarity(p1: Product, p2: Product) -> Tuple[int, List[str], List[str]]:
    shared = _shared(p1.asset_ids, p2.asset_ids)
    explanations = [f"Supports {len(shared)} common asset(s)"] if shared else []
    return _category_score(len(shared)), shared, explanations


# Public API 1: pairs

def pairwise_score(product_a: Product, product_b: Product) -> CompatibilityResult:
    """
    Score one ordered pair. Score and flag are symmetric; pair_id and the
    order of the evidence lists follow the argument order.
    """
    chain_score, shared_chains, chain_exp = _chain_similarity(product_a, product_b)
    asset_score, shared_assets, asset_exp = _asset_similarity(product_a, product_b)
    score = chain_score + asset_score

    return CompatibilityResult(
        pair_id=f"{product_a.id}-{product_b.id}",
        product_a_id=product_a.id,
        product_b_id=product_b.id,
        score=score,
        compatible=score >= PAIR_COMPATIBLE_THRESHOLD,
        reasons=chain_exp + asset_exp,
        shared_chains=shared_chains,
        shared_assets=shared_assets,
    )


def calculate_compatibility(products: Sequence[Product]) -> List[CompatibilityResult]:
    """
    Score every unordered pair once, i < j over `products` as given.
    Fewer than two products yields an empty list.
    """
    items = list(products)
    if len(items) < 2:
        return []

    results: List[CompatibilityResult] = []
    for i, p1 in enumerate(items):
        for p2 in items[i + 1 :]:
            results.append(pairwise_score(p1, p2))
    return results


def classify_pair(result: CompatibilityResult) -> str:
    if result.compatible:
        return TIER_COMPATIBLE
    if result.score >= STACK_PARTIAL_THRESHOLD:
        return TIER_PARTIAL
    return TIER_INCOMPATIBLE


# Public API 2: whole stack

def _round_half_up_mean(total: int, count: int) -> int:
    # exact for non-negative integer totals
    return (2 * total + count) // (2 * count)


def classify_stack_score(score: int) -> str:
    if score >= STACK_COMPATIBLE_THRESHOLD:
        return TIER_COMPATIBLE
    if score >= STACK_PARTIAL_THRESHOLD:
        return TIER_PARTIAL
    return TIER_INCOMPATIBLE


def stack_score(results: Sequence[CompatibilityResult]) -> StackScore:
    """Rounded mean of the pair scores; no pairs scores 0."""
    count = len(results)
    score = _round_half_up_mean(sum(r.score for r in results), count) if count else 0
    tier = classify_stack_score(score)
    return StackScore(score=score, tier=tier, label=TIER_LABELS[tier], comparisons=count)


def compatible_in_stack(
    product: Product, stack: Sequence[Product], exclude_id: Optional[str] = None
) -> List[Product]:
    """Stack products sharing at least one chain with `product`, in stack order."""
    exclude_id = exclude_id or product.id
    chains = set(product.chain_ids)
    return [
        p for p in stack
        if p.id != exclude_id and chains.intersection(p.chain_ids)
    ]
