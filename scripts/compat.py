# scripts/compat.py
import argparse

from backend.catalog.gateway import fetch_relationships
from backend.compatibility.scoring import calculate_compatibility, classify_pair, stack_score


def main():
    parser = argparse.ArgumentParser(description="Score compatibility for a stack of products")
    parser.add_argument(
        "--product", action="append", required=True, dest="products",
        help="Catalog product id (repeat, in stack order)",
    )
    args = parser.parse_args()

    products = fetch_relationships(args.products)
    names = {p.id: p.display_name for p in products}
    results = calculate_compatibility(products)

    for r in results:
        print(
            f"{names[r.product_a_id]} ↔ {names[r.product_b_id]}: "
            f"score={r.score} ({classify_pair(r)}) "
            f"{'; '.join(r.reasons) or 'no shared chains or assets'}"
        )

    summary = stack_score(results)
    print(f"Stack score {summary.score} - {summary.label} ({summary.comparisons} comparisons)")


if __name__ == "__main__":
    main()
