"""Metabolic baseline helpers.

Provides BMI and a sedentary BMR used as the starting point before step and
workout bonuses.
"""

from typing import Optional
from core.logger import get_logger
from core.numeric import round_half_up

logger = get_logger("services.nutrition_calculator")

SEDENTARY_MULTIPLIER = 1.2


class NutritionCalculator:
    """Class-based nutrition calculator used across the app."""

    def calculate_bmi(self, height_cm: float, weight_kg: float) -> float:
        """Calculate BMI from height in cm and weight in kg."""
        h_m = height_cm / 100.0
        if h_m <= 0:
            return 0.0
        return weight_kg / (h_m * h_m)

    def calculate_dynamic_bmr(self, weight_kg: float, height_cm: float, age: int, is_male: bool) -> int:
        """Mifflin-St Jeor BMR times the sedentary multiplier, rounded."""
        bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
        bmr = bmr + 5 if is_male else bmr - 161
        val = int(round_half_up(bmr * SEDENTARY_MULTIPLIER))
        logger.debug("Dynamic BMR calculated: %s", val)
        return val

    def baseline(self, weight_kg: float, height_cm: Optional[float], age: Optional[int], is_male: bool):
        """Return `(bmi, bmr)`; either is None when its inputs are missing."""
        if not height_cm:
            return None, None
        bmi = round_half_up(self.calculate_bmi(height_cm, weight_kg), 1)
        if not age:
            return bmi, None
        return bmi, self.calculate_dynamic_bmr(weight_kg, height_cm, age, is_male)


# export singleton
nutrition_calculator = NutritionCalculator()
__all__ = ["NutritionCalculator", "nutrition_calculator"]
