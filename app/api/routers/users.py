from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.data.database import get_db
from app.domain.errors import DomainError
from app.services.user_service import UserService
from app.domain.schemas import SignUpIn, LoginIn, UserRead, AuthOut
from app.api.routers.errors import to_http

router = APIRouter(prefix="/users", tags=["users"])

@router.post("/signup", response_model=AuthOut, status_code=201)
def sign_up(payload: SignUpIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.sign_up(payload)
    except DomainError as e:
        raise to_http(e)

@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.login(payload)
    except DomainError as e:
        raise to_http(e)

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except DomainError as e:
        raise to_http(e)
