import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.repos.user_repo import UserRepo
from app.domain.errors import AuthenticationError, ConflictError, InvalidArgumentError, NotFoundError
from app.domain.schemas import SignUpIn, LoginIn, UserRead, AuthOut
from app.utils.logging import get_logger

logger = get_logger(__name__)

#tokeny wydaje osobny serwis auth, tu tylko placeholder
STUB_TOKEN = "token-will-be-generated-by-auth-service"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > 72:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def sign_up(self, payload: SignUpIn) -> AuthOut:
        email = payload.email.strip().lower()
        #bcrypt bierze max 72 bajty
        if len(payload.password.encode("utf-8")) > 72:
            raise InvalidArgumentError("Password is too long")

        if self.repo.get_user_by_email(email):
            raise ConflictError("Email already registered")

        user = UserModel(
            email=email,
            username=payload.username,
            password_hash=hash_password(payload.password),
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Email already registered")

        logger.info(f"Zarejestrowano uzytkownika {created.id}")
        return AuthOut(token=STUB_TOKEN, user=UserRead.model_validate(created))

    def login(self, payload: LoginIn) -> AuthOut:
        user = self.repo.get_user_by_email(payload.email.strip().lower())
        #ten sam komunikat dla zlego emaila i zlego hasla
        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        return AuthOut(token=STUB_TOKEN, user=UserRead.model_validate(user))

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)
