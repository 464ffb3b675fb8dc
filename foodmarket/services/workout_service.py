# foodmarket/services/workout_service.py
import re
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from foodmarket.data.models.user import UserModel
from foodmarket.domain.errors import NotFoundError
from foodmarket.domain.schemas import WEEKDAYS
from foodmarket.repos.item_repo import ItemRepo
from foodmarket.repos.order_repo import OrderRepo
from foodmarket.repos.user_repo import UserRepo
from foodmarket.services.ai_client import WorkoutPlanClient
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_protein_grams(protein: str | None) -> int:
    """Leading integer of a free-text protein field, 0 when there is none."""
    if not protein:
        return 0
    match = _LEADING_INT.match(protein)
    return int(match.group(1)) if match else 0


def weekday_name(moment: datetime) -> str:
    # datetime.weekday() counts from Monday, WEEKDAYS from Sunday
    return WEEKDAYS[(moment.weekday() + 1) % 7]


def build_prompt(daily_protein: int, muscle_group: str) -> str:
    return (
        f"I ate {daily_protein} g of protein today and today's training focus is {muscle_group}. "
        "Suggest a workout for today. Reply only with a JSON object with keys "
        '"focus" (string), "exercises" (list of objects with "name", "sets", "reps") '
        'and "notes" (string).'
    )


class WorkoutService:
    """Daily protein from today's purchases, relayed to the workout planner."""

    def __init__(self, db: Session, ai_client: WorkoutPlanClient):
        self.users = UserRepo(db)
        self.orders = OrderRepo(db)
        self.items = ItemRepo(db)
        self.ai_client = ai_client

    def daily_protein(self, user: UserModel, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        orders = self.orders.list_for_user_since(user.id, start_of_day)
        lines = [line for order in orders for line in order.lines]
        items = self.items.get_items(line.item_id for line in lines)

        return sum(
            parse_protein_grams(items[line.item_id].protein) * line.quantity
            for line in lines
            if line.item_id in items
        )

    def workout_plan(self, email: str, now: datetime | None = None) -> Dict[str, Any]:
        user = self.users.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        now = now or datetime.now(timezone.utc)
        protein = self.daily_protein(user, now)
        muscle_group = (user.workout_split or {}).get(weekday_name(now), "Rest")

        logger.info(f"Requesting workout plan for {email}: {protein} g protein, focus {muscle_group}")
        plan = self.ai_client.generate_plan(build_prompt(protein, muscle_group))

        return {"daily_protein": protein, "muscle_group": muscle_group, "plan": plan}
