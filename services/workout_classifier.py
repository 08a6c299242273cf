"""Map Health Connect exercise types to metabolic workout categories."""

from typing import Optional

# Health Connect ExerciseSessionRecord.exerciseType codes.
# Strength, HIIT, combat and bodyweight work.
ANAEROBIC_TYPES = frozenset({
    3, 6, 7, 10, 11, 12, 13, 15, 17, 18, 19, 20, 21, 22, 23, 24, 34, 36, 40, 41,
    42, 43, 44, 49, 51, 66, 67, 68, 69, 70, 81,
})

# Running, cycling, rowing, swimming, skiing, team sports.
AEROBIC_INTENSE_TYPES = frozenset({
    8, 9, 25, 37, 53, 54, 56, 57, 61, 62, 63, 64, 68, 69, 72, 73, 74, 78,
})

# Breathing, pilates, stretching, walking, yoga.
LOW_INTENSITY_TYPES = frozenset({33, 48, 71, 79, 83})

WORKOUT_MULTIPLIERS = {
    "anaerobic": 1.5,
    "aerobic_intense": 1.2,
    "low": 0.8,
}


def get_workout_category(exercise_type: int) -> Optional[str]:
    """Return 'anaerobic', 'aerobic_intense', 'low' or None.

    Stair climbing codes appear in both high-intensity sets; anaerobic wins.
    """
    if exercise_type in ANAEROBIC_TYPES:
        return "anaerobic"
    if exercise_type in AEROBIC_INTENSE_TYPES:
        return "aerobic_intense"
    if exercise_type in LOW_INTENSITY_TYPES:
        return "low"
    return None


def get_workout_multiplier(category: Optional[str]) -> float:
    """Carb bonus multiplier for the last workout; 1.0 when there was none."""
    return WORKOUT_MULTIPLIERS.get(category, 1.0)
