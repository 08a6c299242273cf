"""Nitrogen balance optimizer: a protein target that follows training load."""

import math
from typing import Optional

from core.logger import get_logger
from core.numeric import round_half_up
from schemas.bio_schema import ProteinTarget

logger = get_logger("services.protein_optimizer")

DAMAGE_PER_KG = {
    "anaerobic": 0.6,
    "aerobic_intense": 0.3,
}

MESSAGES = {
    "anaerobic": "Protein synthesis maximized",
    "aerobic_intense": "Anti-catabolic shield",
}


def compute_protein_target(
    body_weight_kg: float,
    last_workout_category: Optional[str],
    active_kcal: float,
    base_target: float,
) -> ProteinTarget:
    """Raise the protein baseline by muscle damage and energy expenditure.

    The damage bonus is grams per kg of body weight for the last workout
    category; the safety buffer adds 5g per full 300 active kcal whatever
    the category. The result never drops below `base_target`.
    """
    weight = max(0.0, body_weight_kg)
    base = max(0.0, base_target)
    kcal = max(0.0, active_kcal)

    damage_bonus = weight * DAMAGE_PER_KG.get(last_workout_category, 0.0)
    safety_buffer = math.floor(kcal / 300) * 5
    target = int(round_half_up(base + damage_bonus + safety_buffer))
    target = max(int(math.ceil(base)), target)

    logger.debug("Protein target: base=%s damage=%.1f buffer=%s -> %s", base, damage_bonus, safety_buffer, target)
    return ProteinTarget(target=target, message=MESSAGES.get(last_workout_category))
