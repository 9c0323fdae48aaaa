# backend/routes/products.py
from typing import Optional, List
from fastapi import APIRouter, Depends, Query

from utils.repository import ProductRepository, get_repository
from utils.reconciler import apply_change
import schemas.product as product_schemas

router = APIRouter(prefix="/api", tags=["Products"])


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=List[product_schemas.ProductOut])
def list_products(
    category: Optional[str] = Query(None),
    subcategory: Optional[str] = Query(None),
    repo: ProductRepository = Depends(get_repository),
):
    return repo.list(category=category, subcategory=subcategory)


# =========================
# TAXONOMY
# =========================
@router.get("/categories", response_model=List[str])
def get_categories(repo: ProductRepository = Depends(get_repository)):
    return repo.categories()

@router.get("/subcategories", response_model=List[str])
def get_subcategories(
    category: Optional[str] = Query(None),
    repo: ProductRepository = Depends(get_repository),
):
    return repo.subcategories(category)


# =========================
# SINGLE PRODUCT (id or product code)
# =========================
@router.get("/product/{identifier}", response_model=product_schemas.ProductOut)
def get_product(identifier: str, repo: ProductRepository = Depends(get_repository)):
    return repo.get_by_identifier(identifier)


# =========================
# ADD PRODUCT
# =========================
@router.post("/add", response_model=product_schemas.ProductCreated)
def add_product(
    payload: product_schemas.ProductCreate,
    repo: ProductRepository = Depends(get_repository),
):
    product = repo.create(
        category=payload.category,
        subcategory=payload.subcategory,
        quantity=payload.quantity,
        wholesale_price=payload.wholesale_price,
        retail_price=payload.retail_price,
    )
    return {"id": product.id, "product_code": product.product_code}


# =========================
# UPDATE: restock, sale or metadata
# =========================
@router.post("/update/{product_id}", response_model=product_schemas.UpdateResult)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdateRequest,
    repo: ProductRepository = Depends(get_repository),
):
    updated = apply_change(repo, product_id, payload.to_change())
    return {"updated": updated}


# =========================
# DELETE
# =========================
@router.delete("/delete/{product_id}", response_model=product_schemas.DeleteResult)
def delete_product(product_id: int, repo: ProductRepository = Depends(get_repository)):
    return {"deleted": repo.delete(product_id)}
