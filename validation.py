# validation.py
from datetime import date

from config import (
    DAYS_PER_WEEK_RANGE,
    HOURS_RANGE,
    LIFE_EXPECTANCY_RANGE,
    MAX_DAILY_HOURS,
    MIN_BIRTH_YEAR,
)


def validate_inputs(birthdate, activities, life_expectancy, today=None):
    """Validate the visualizer form and return any errors found"""
    errors = []
    today = today or date.today()

    if birthdate is None:
        errors.append("Birthdate is required")
    elif birthdate >= today:
        errors.append("Birthdate must be in the past")
    elif birthdate.year < MIN_BIRTH_YEAR:
        errors.append(f"Birthdate must be after {MIN_BIRTH_YEAR}")

    if life_expectancy is None:
        errors.append("Please select a country or enter life expectancy manually")
    elif not LIFE_EXPECTANCY_RANGE[0] <= life_expectancy <= LIFE_EXPECTANCY_RANGE[1]:
        errors.append(
            f"Life expectancy must be between {LIFE_EXPECTANCY_RANGE[0]:g} and {LIFE_EXPECTANCY_RANGE[1]:g}"
        )

    if not activities:
        errors.append("Add at least one activity")

    for index, activity in enumerate(activities or [], start=1):
        label = activity.name.strip() or f"Activity {index}"
        if not activity.name.strip():
            errors.append(f"Activity {index} needs a name")
        if not HOURS_RANGE[0] <= activity.hours <= HOURS_RANGE[1]:
            errors.append(
                f"{label}: hours must be between {HOURS_RANGE[0]:g} and {HOURS_RANGE[1]:g}"
            )
        if not DAYS_PER_WEEK_RANGE[0] <= activity.days_per_week <= DAYS_PER_WEEK_RANGE[1]:
            errors.append(
                f"{label}: days per week must be between {DAYS_PER_WEEK_RANGE[0]} and {DAYS_PER_WEEK_RANGE[1]}"
            )

    total_hours = sum(a.effective_daily_hours for a in activities or [])
    if total_hours > MAX_DAILY_HOURS:
        errors.append(
            f"The total time spent on activities cannot exceed {MAX_DAILY_HOURS:g} hours per day"
        )

    return errors
