# scripts/products.py
import argparse

from backend.catalog.gateway import fetch_products
from backend.catalog.ranking import rank_candidates
from backend.use_cases import get_use_case


def main():
    parser = argparse.ArgumentParser(description="List candidate products for a use-case category")
    parser.add_argument("--use-case", required=True, help="Use case id, e.g. trading")
    parser.add_argument("--category", required=True, help="Category name, e.g. Wallet")
    parser.add_argument("--search", default=None, help="Filter by name/description")
    parser.add_argument("--limit", type=int, default=None)
    args = parser.parse_args()

    template = get_use_case(args.use_case)
    if template is None:
        parser.error(f"unknown use case '{args.use_case}'")
    category = template.category(args.category)
    if category is None:
        parser.error(f"'{args.category}' is not a category of {template.name}")

    products = rank_candidates(
        fetch_products(category.product_type_ids, limit=args.limit), args.search
    )
    for rank, p in enumerate(products, 1):
        print(
            f"{rank:>3}. {p.display_name} ({p.id}) score={p.connection_score or 0} "
            f"chains={len(p.chain_ids)} assets={len(p.asset_ids)}"
        )
    print(f"{len(products)} product(s) for {template.name} / {category.name}")


if __name__ == "__main__":
    main()
