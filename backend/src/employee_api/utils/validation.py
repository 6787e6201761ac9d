"""Input validation helpers shared by the employee policy rules."""

from datetime import date, datetime, timezone

from employee_api.constants.validation import ADULT_AGE, MIN_PHONE_COUNT

PHONE_COUNT_MESSAGE = f"Employee must have more than one phone (min {MIN_PHONE_COUNT})."
PHONE_SIGN_MESSAGE = "Phones must be positive numbers."
MINOR_MESSAGE = f"Employee must not be a minor (must be {ADULT_AGE}+)."


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def distinct_phones(phones: list[int] | None) -> list[int]:
    """Collapse duplicate phone numbers, keeping first-seen order."""
    if not phones:
        return []
    return list(dict.fromkeys(phones))


def phone_validation_error(phones: list[int] | None) -> str | None:
    """Check a submitted phone list.

    Duplicates are collapsed before the count check, so ``[5, 5]`` is a
    single phone.

    Args:
        phones: Submitted phone numbers (may be None)

    Returns:
        Error message, or None if the list is acceptable
    """
    unique = distinct_phones(phones)
    if len(unique) < MIN_PHONE_COUNT:
        return PHONE_COUNT_MESSAGE
    if any(phone <= 0 for phone in unique):
        return PHONE_SIGN_MESSAGE
    return None


def calculate_age(birth_date: date, today: date | None = None) -> int:
    """Age in whole years.

    One year is subtracted when this year's birthday has not happened yet.
    A February 29 birthday counts as reached on March 1 in common years.
    """
    today = today or utc_today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def is_minor(birth_date: date, today: date | None = None) -> bool:
    """Check whether someone born on ``birth_date`` is under 18.

    Someone whose 18th birthday is today is not a minor.
    """
    return calculate_age(birth_date, today) < ADULT_AGE
