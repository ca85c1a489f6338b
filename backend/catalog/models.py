# backend/catalog/models.py
"""
Normalized catalog shapes.

The Grid answers with nested GraphQL objects whose optional parts come and go
between query variants. Everything is flattened here once, so the rest of the
code never null-checks upstream structure.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProductType(BaseModel):
    name: str = ""
    definition: Optional[str] = None


class ProfileInfo(BaseModel):
    name: str = ""
    logo: Optional[str] = None
    icon: Optional[str] = None
    description_short: Optional[str] = None
    description_long: Optional[str] = None
    tag_line: Optional[str] = None
    sector: Optional[str] = None


class SmartContract(BaseModel):
    address: str
    name: Optional[str] = None


class Deployment(BaseModel):
    chain_id: Optional[str] = None
    chain_name: Optional[str] = None
    smart_contracts: List[SmartContract] = Field(default_factory=list)


class AssetSupport(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    ticker: Optional[str] = None
    icon: Optional[str] = None
    support_type: Optional[str] = None


class SupportedProduct(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    product_type: Optional[str] = None


class ProductUrl(BaseModel):
    url: str
    url_type: Optional[str] = None


class Product(BaseModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    launch_date: Optional[str] = None
    product_type: Optional[ProductType] = None
    profile: ProfileInfo = Field(default_factory=ProfileInfo)
    connection_score: Optional[float] = None
    deployments: List[Deployment] = Field(default_factory=list)
    assets: List[AssetSupport] = Field(default_factory=list)
    supports_products: List[SupportedProduct] = Field(default_factory=list)
    urls: List[ProductUrl] = Field(default_factory=list)

    @property
    def chain_ids(self) -> List[str]:
        """Chains this product is deployed on, first-seen order, no repeats."""
        return list(dict.fromkeys(d.chain_id for d in self.deployments if d.chain_id))

    @property
    def asset_ids(self) -> List[str]:
        """Assets this product supports, first-seen order, no repeats."""
        return list(dict.fromkeys(a.id for a in self.assets if a.id))

    @property
    def display_name(self) -> str:
        return self.profile.name or self.name


# Normalization

def _first_profile(raw: Any) -> Dict[str, Any]:
    # profileInfos arrives as a list from the raw API and as an object from
    # older proxies; both are accepted.
    if isinstance(raw, list):
        return raw[0] if raw and isinstance(raw[0], dict) else {}
    if isinstance(raw, dict):
        return raw
    return {}


def _name_of(raw: Any) -> Optional[str]:
    if isinstance(raw, dict):
        return raw.get("name")
    return None


def _as_dict(raw: Any, field: str) -> Dict[str, Any]:
    """Nested object or {} when absent; any other JSON type is malformed."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{field}' is a {type(raw).__name__}, expected an object")
    return raw


def _as_list(raw: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def normalize_product(raw: Dict[str, Any]) -> Product:
    """
    Build a Product from one GraphQL `products` row.

    Missing profile data falls back to the product's own name and
    description; missing relationship lists become empty lists.
    Raises ValueError when the row carries no id or a nested object has
    the wrong JSON type.
    """
    product_id = raw.get("id")
    if not product_id:
        raise ValueError("product row has no id")

    name = raw.get("name") or ""
    description = raw.get("description")
    root = _as_dict(raw.get("root"), "root")

    profile_raw = _first_profile(root.get("profileInfos"))
    profile = ProfileInfo(
        name=profile_raw.get("name") or name,
        logo=profile_raw.get("logo"),
        icon=profile_raw.get("icon"),
        description_short=profile_raw.get("descriptionShort") or description,
        description_long=profile_raw.get("descriptionLong"),
        tag_line=profile_raw.get("tagLine"),
        sector=_name_of(profile_raw.get("profileSector")),
    )

    ranking = root.get("theGridRanking") or {}
    if isinstance(ranking, list):
        ranking = ranking[0] if ranking else {}
    connection_score = ranking.get("connectionScore") if isinstance(ranking, dict) else None

    product_type = None
    type_raw = _as_dict(raw.get("productType"), "productType")
    if type_raw:
        product_type = ProductType(
            name=type_raw.get("name") or "",
            definition=type_raw.get("definition"),
        )

    deployments: List[Deployment] = []
    for d in _as_list(raw.get("productDeployments")):
        scd = _as_dict(d.get("smartContractDeployment"), "smartContractDeployment")
        chain = _as_dict(scd.get("deployedOnProduct"), "deployedOnProduct")
        deployments.append(
            Deployment(
                chain_id=chain.get("id"),
                chain_name=chain.get("name"),
                smart_contracts=[
                    SmartContract(address=c["address"], name=c.get("name"))
                    for c in _as_list(scd.get("smartContracts"))
                    if c.get("address")
                ],
            )
        )

    assets: List[AssetSupport] = []
    for rel in _as_list(raw.get("productAssetRelationships")):
        asset = _as_dict(rel.get("asset"), "asset")
        assets.append(
            AssetSupport(
                id=asset.get("id"),
                name=asset.get("name"),
                ticker=asset.get("ticker"),
                icon=asset.get("icon"),
                support_type=_name_of(rel.get("assetSupportType")),
            )
        )

    supports: List[SupportedProduct] = []
    for s in _as_list(raw.get("supportsProducts")):
        target = _as_dict(s.get("supportsProduct"), "supportsProduct")
        supports.append(
            SupportedProduct(
                id=target.get("id"),
                name=target.get("name"),
                product_type=_name_of(target.get("productType")),
            )
        )

    urls = [
        ProductUrl(url=u["url"], url_type=_name_of(u.get("urlType")))
        for u in _as_list(raw.get("urls"))
        if u.get("url")
    ]

    return Product(
        id=str(product_id),
        name=name,
        description=description,
        launch_date=raw.get("launchDate"),
        product_type=product_type,
        profile=profile,
        connection_score=connection_score,
        deployments=deployments,
        assets=assets,
        supports_products=supports,
        urls=urls,
    )
