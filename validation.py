import re
import logging
from datetime import date, datetime
from typing import Optional

logger = logging.getLogger(__name__)

VALID_GENDERS = ('Masculin', 'Féminin', 'Autre')
NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 32
INVALID_DATA_MESSAGE = "Données invalides. Veuillez vérifier vos informations."

LETTER_ONLY_RE = re.compile(r'^[a-zA-ZÀ-ÿ\s-]+$')


def parse_birth_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        return None


def is_valid_name(name: str) -> bool:
    # limits are in UTF-8 bytes, so an accented letter counts twice
    if not name or not NAME_MIN_LENGTH <= len(name.encode('utf-8')) <= NAME_MAX_LENGTH:
        return False
    return LETTER_ONLY_RE.match(name) is not None


def validate_user_data(user_data, today: Optional[date] = None) -> bool:
    """
    Check a registration candidate against the form rules.

    Only a pass/fail answer is returned; the reason is logged at debug level.
    """
    if not is_valid_name(user_data.last_name):
        logger.debug(f"Rejected last name: {user_data.last_name!r}")
        return False

    if not is_valid_name(user_data.first_name):
        logger.debug(f"Rejected first name: {user_data.first_name!r}")
        return False

    if user_data.gender not in VALID_GENDERS:
        logger.debug(f"Rejected gender: {user_data.gender!r}")
        return False

    if not user_data.birth_date:
        logger.debug("Rejected empty birth date")
        return False

    birth_date = parse_birth_date(user_data.birth_date)
    if birth_date is None or birth_date > (today or date.today()):
        logger.debug(f"Rejected birth date: {user_data.birth_date!r}")
        return False

    return True


def compute_age(birth_date: date, today: Optional[date] = None) -> int:
    """Whole years between ``birth_date`` and ``today``."""
    today = today or date.today()
    had_birthday = (today.month, today.day) >= (birth_date.month, birth_date.day)
    return today.year - birth_date.year - (0 if had_birthday else 1)
