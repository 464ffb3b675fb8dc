from sqlalchemy import select
from sqlalchemy.orm import Session
from foodmarket.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_workout_split(self, user: UserModel, split: dict) -> UserModel:
        user.workout_split = dict(split)
        self.db.commit()
        self.db.refresh(user)
        return user
