from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodmarket.api.deps import get_ai_client
from foodmarket.data.database import get_db
from foodmarket.domain.schemas import WorkoutPlanIn, WorkoutPlanOut
from foodmarket.services.ai_client import WorkoutPlanClient
from foodmarket.services.workout_service import WorkoutService

router = APIRouter(tags=["workouts"])


@router.post("/workoutplan", response_model=WorkoutPlanOut)
def workout_plan(
    payload: WorkoutPlanIn,
    db: Session = Depends(get_db),
    ai_client: WorkoutPlanClient = Depends(get_ai_client),
):
    return WorkoutService(db, ai_client).workout_plan(payload.email)
