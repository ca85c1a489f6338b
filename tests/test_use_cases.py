"""Tests for the use-case table."""

import pytest

from backend.use_cases import (
    CategoryDefinition,
    UseCaseTemplate,
    get_use_case,
    get_use_cases,
    load_use_cases,
    parse_use_cases,
)


def test_shipped_table_loads():
    templates = get_use_cases()

    assert [t.id for t in templates] == ["trading", "gaming", "payments", "nft", "developer"]
    trading = get_use_case("trading")
    assert trading.category_names == ["Wallet", "DEX", "Bridge"]
    assert [c.required for c in trading.categories] == [True, True, False]
    assert get_use_case("developer").categories[0].product_type_ids == ("15", "16", "17")


def test_unknown_use_case():
    assert get_use_case("defi-degen") is None


def test_duplicate_category_names_rejected():
    with pytest.raises(ValueError):
        UseCaseTemplate(
            id="dup",
            name="Dup",
            description="",
            icon="",
            categories=(
                CategoryDefinition(name="Wallet", product_type_ids=("692",)),
                CategoryDefinition(name="Wallet", product_type_ids=("1",)),
            ),
        )


def test_empty_categories_rejected():
    with pytest.raises(ValueError):
        UseCaseTemplate(id="empty", name="Empty", description="", icon="")


def test_category_without_type_ids_rejected():
    with pytest.raises(ValueError):
        CategoryDefinition(name="Wallet", product_type_ids=())


def test_duplicate_use_case_ids_rejected():
    entry = {"id": "x", "categories": [{"name": "A", "product_type_ids": [1]}]}
    with pytest.raises(ValueError):
        parse_use_cases({"use_cases": [entry, entry]})


def test_parse_coerces_ids_to_strings():
    (template,) = parse_use_cases(
        {"use_cases": [{"id": "x", "categories": [{"name": "A", "product_type_ids": [25]}]}]}
    )
    assert template.categories[0].product_type_ids == ("25",)
    assert template.categories[0].required is True


def test_load_from_custom_file(tmp_path):
    path = tmp_path / "cases.yaml"
    path.write_text(
        "version: 2\n"
        "use_cases:\n"
        "  - id: solo\n"
        "    name: Solo\n"
        "    categories:\n"
        "      - name: Wallet\n"
        "        product_type_ids: ['692']\n"
        "        required: false\n",
        encoding="utf-8",
    )

    (template,) = load_use_cases(str(path))

    assert template.name == "Solo"
    assert template.categories[0].required is False


def test_to_dict():
    data = get_use_case("nft").to_dict()
    assert data["icon"] == "Image"
    assert data["categories"][1] == {
        "name": "NFT Marketplace",
        "productTypeIds": ["37"],
        "required": True,
    }
