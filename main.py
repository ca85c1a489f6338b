import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from backend.catalog.gateway import fetch_product, fetch_products, fetch_relationships
from backend.catalog.models import Product
from backend.catalog.ranking import rank_candidates
from backend.compatibility.scoring import calculate_compatibility, stack_score
from backend.config import get_settings
from backend.errors import UpstreamDataError, UpstreamUnavailable
from backend.log import get_logger, log_with_context
from backend.use_cases import get_use_case, get_use_cases

logger = get_logger(__name__)

app = FastAPI(title="Web3 Stack Builder API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Models
class ProductIdsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_ids: List[str] = Field(default_factory=list, alias="productIds")


# Upstream failures
@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    return JSONResponse(
        status_code=502,
        content={"error": "Catalog unavailable", "message": str(exc)},
    )


@app.exception_handler(UpstreamDataError)
async def upstream_data_handler(request: Request, exc: UpstreamDataError):
    return JSONResponse(
        status_code=502,
        content={"error": "Catalog error", "message": str(exc), "errors": exc.errors},
    )


# Health & use cases
@app.get("/api/health")
def health():
    return {"status": "ok", "use_cases": len(get_use_cases())}


@app.get("/api/use-cases")
def api_list_use_cases():
    return {"use_cases": [u.to_dict() for u in get_use_cases()]}


@app.get("/api/use-cases/{use_case_id}")
def api_get_use_case(use_case_id: str):
    template = get_use_case(use_case_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Use case not found")
    return template.to_dict()


@app.get("/api/use-cases/{use_case_id}/categories/{index}/products", response_model=List[Product])
def api_category_candidates(
    use_case_id: str,
    index: int,
    q: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
):
    """
    Candidate products for one step of a use case, highest connection
    score first, optionally narrowed by a search string.
    """
    template = get_use_case(use_case_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Use case not found")
    if not 0 <= index < len(template.categories):
        raise HTTPException(status_code=404, detail="Category index out of range")

    category = template.categories[index]
    products = fetch_products(category.product_type_ids, limit=limit)
    return rank_candidates(products, q)


# Catalog proxy
@app.get("/api/products", response_model=List[Product])
def api_list_products(
    productTypeIds: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
):
    if not productTypeIds or not productTypeIds.strip(","):
        raise HTTPException(status_code=400, detail="productTypeIds is required")
    return fetch_products(productTypeIds.split(","), limit=limit)


@app.post("/api/products/relationships", response_model=List[Product])
def api_product_relationships(req: ProductIdsRequest):
    if not req.product_ids:
        raise HTTPException(status_code=400, detail="productIds array is required")
    return fetch_relationships(req.product_ids)


@app.get("/api/products/{product_id}", response_model=Product)
def api_product_details(product_id: str):
    product = fetch_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# Compatibility - a stack of catalog products
@app.post("/api/compat/stack")
def api_stack_compatibility(req: ProductIdsRequest) -> Dict[str, Any]:
    """
    Score every pair of the given products, in the order given, plus the
    aggregate stack score. Ids unknown to the catalog are skipped.
    """
    if not req.product_ids:
        raise HTTPException(status_code=400, detail="productIds array is required")

    products = fetch_relationships(req.product_ids)
    results = calculate_compatibility(products)
    summary = stack_score(results)
    log_with_context(
        logger,
        logging.INFO,
        "Scored stack",
        products=len(products),
        score=summary.score,
        tier=summary.tier,
    )
    return {
        "product_ids": [p.id for p in products],
        "results": [r.model_dump() for r in results],
        "stack": summary.model_dump(),
    }
