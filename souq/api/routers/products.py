# souq/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from souq.api.deps import get_language, require_admin
from souq.data.database import get_db
from souq.domain.errors import NotFoundError
from souq.domain.schemas import ProductCreate, ProductOut
from souq.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.post("/", response_model=ProductOut, status_code=201, dependencies=[Depends(require_admin)])
def create_product(
    payload: ProductCreate,
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    svc = ProductService(db)
    try:
        return svc.create_product(payload, lang)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[ProductOut])
def list_products(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    return ProductService(db).list_products(lang, limit=limit, offset=offset)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    lang: str = Depends(get_language),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).get_product(product_id, lang)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
