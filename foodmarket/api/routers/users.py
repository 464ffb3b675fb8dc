from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodmarket.data.database import get_db
from foodmarket.domain.schemas import (
    LoginIn,
    LoginOut,
    MessageOut,
    ProfileOut,
    RegisterIn,
    WorkoutSplitIn,
    WorkoutSplitOut,
)
from foodmarket.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.post("/register", response_model=MessageOut)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    UserService(db).register(payload)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = UserService(db).login(payload.email, payload.password)
    return {
        "message": "Login successful",
        "username": user.username,
        "email": user.email,
        "location": user.location,
    }


@router.get("/profile/{email}", response_model=ProfileOut)
def profile(email: str, db: Session = Depends(get_db)):
    return UserService(db).profile(email)


@router.get("/workoutsplit/{email}", response_model=WorkoutSplitOut)
def get_workout_split(email: str, db: Session = Depends(get_db)):
    return {"email": email, "workout_split": UserService(db).get_workout_split(email)}


@router.put("/workoutsplit/{email}", response_model=WorkoutSplitOut)
def set_workout_split(email: str, payload: WorkoutSplitIn, db: Session = Depends(get_db)):
    split = UserService(db).set_workout_split(email, payload.workout_split)
    return {"email": email, "workout_split": split}
