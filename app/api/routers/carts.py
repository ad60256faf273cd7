#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import DomainError
from app.domain.schemas import (
    CreateCartIn,
    AddItemIn,
    UpdateItemIn,
    CartOut,
)
from app.services.cart_service import CartService
from app.services.lock_service import LockService
from app.utils.settings import CART_LOCK_ENABLED
from app.api.routers.errors import to_http

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(db: Session):
    return CartService(
        db=db,
        lock_service=LockService() if CART_LOCK_ENABLED else None,
    )


@router.post("/", response_model=CartOut)
def create_cart(payload: CreateCartIn, response: Response, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        cart, created = svc.create_cart(payload.user_id)
    except DomainError as e:
        raise to_http(e)
    if created:
        response.status_code = 201
    return cart


@router.get("/", response_model=CartOut)
def get_cart(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_cart(user_id)
    except DomainError as e:
        raise to_http(e)


@router.post("/items", response_model=CartOut)
def add_item(payload: AddItemIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=payload.user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            price=payload.price,
        )
    except DomainError as e:
        raise to_http(e)


@router.put("/items", response_model=CartOut)
def update_item(payload: UpdateItemIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_item(payload.user_id, payload.product_id, payload.quantity)
    except DomainError as e:
        raise to_http(e)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user_id, product_id)
    except DomainError as e:
        raise to_http(e)


@router.post("/clear", response_model=CartOut)
def clear_cart(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.clear_cart(user_id)
    except DomainError as e:
        raise to_http(e)


@router.post("/deactivate", response_model=CartOut)
def deactivate_cart(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.deactivate_cart(user_id)
    except DomainError as e:
        raise to_http(e)


@router.delete("/", status_code=204)
def delete_cart(user_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_cart(user_id)
    except DomainError as e:
        raise to_http(e)
    return Response(status_code=204)
