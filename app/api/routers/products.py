# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import DomainError
from app.domain.schemas import ProductIn, ProductOut
from app.services.product_service import ProductService
from app.api.routers.errors import to_http

router = APIRouter(prefix="/products", tags=["products"])


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return ProductService(db).create_product(payload)


@router.get("/", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return ProductService(db).list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except DomainError as e:
        raise to_http(e)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductIn, db: Session = Depends(get_db)):
    try:
        return ProductService(db).update_product(product_id, payload)
    except DomainError as e:
        raise to_http(e)


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        ProductService(db).delete_product(product_id)
    except DomainError as e:
        raise to_http(e)
    return Response(status_code=204)
