# foodmarket/api/deps.py
from functools import lru_cache

from foodmarket.services.ai_client import WorkoutPlanClient
from foodmarket.services.lock_service import LockService


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_ai_client() -> WorkoutPlanClient:
    return WorkoutPlanClient()
