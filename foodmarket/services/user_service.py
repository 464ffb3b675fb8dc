from typing import Any, Dict

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from foodmarket.data.models.user import UserModel, DEFAULT_WORKOUT_SPLIT
from foodmarket.domain.errors import AuthenticationError, DuplicateUserError, NotFoundError
from foodmarket.domain.schemas import RegisterIn
from foodmarket.repos.cart_repo import CartRepo
from foodmarket.repos.item_repo import ItemRepo
from foodmarket.repos.user_repo import UserRepo
from foodmarket.services.presenters import cart_to_list, item_to_dict
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)

_hasher = PasswordHasher()


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> UserModel:
        if self.repo.get_user_by_email(payload.email):
            raise DuplicateUserError(payload.email)

        user = UserModel(
            username=payload.username,
            email=payload.email,
            password_hash=_hasher.hash(payload.password),
            location=payload.location,
            workout_split=dict(DEFAULT_WORKOUT_SPLIT),
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # lost a race against another registration with the same email
            self.db.rollback()
            raise DuplicateUserError(payload.email)

        logger.info(f"Registered user {created.email}")
        return created

    def login(self, email: str, password: str) -> UserModel:
        user = self.repo.get_user_by_email(email)
        if not user:
            raise AuthenticationError("User not found")

        try:
            _hasher.verify(user.password_hash, password)
        except (VerificationError, InvalidHashError):
            raise AuthenticationError("Incorrect password")

        return user

    def get_user(self, email: str) -> UserModel:
        user = self.repo.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return user

    def profile(self, email: str) -> Dict[str, Any]:
        """User details, resolved cart and items offered at the user's location by other sellers."""
        user = self.get_user(email)
        cart = CartRepo(self.db).get_resolved_cart(user.id)
        nearby = ItemRepo(self.db).list_nearby(user.location, exclude_seller=email) if user.location else []

        return {
            "username": user.username,
            "email": user.email,
            "location": user.location,
            "cart": cart_to_list(cart),
            "nearby_items": [item_to_dict(i) for i in nearby],
        }

    def get_workout_split(self, email: str) -> Dict[str, str]:
        return dict(self.get_user(email).workout_split)

    def set_workout_split(self, email: str, split: Dict[str, str]) -> Dict[str, str]:
        user = self.repo.update_workout_split(self.get_user(email), split)
        logger.info(f"Workout split updated for {email}")
        return dict(user.workout_split)
