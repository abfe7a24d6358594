"""
The ``userdata`` cookie: the last registration a client submitted, kept on
the client as five ``|``-separated fields.
"""
from dataclasses import dataclass

COOKIE_NAME = 'userdata'
COOKIE_SEPARATOR = '|'
COOKIE_FIELD_COUNT = 5


class MalformedCookieError(ValueError):
    """Raised when a cookie value does not decode into a UserData."""

    def __init__(self, value: str, reason: str):
        super().__init__(f"Malformed {COOKIE_NAME} cookie ({reason}): {value!r}")
        self.value = value
        self.reason = reason


@dataclass
class UserData:
    first_name: str = ''
    last_name: str = ''
    birth_date: str = ''
    gender: str = ''
    age: int = 0
    is_form_success: bool = False

    @classmethod
    def from_form(cls, form) -> 'UserData':
        return cls(
            last_name=form.get('lastname', '').strip(),
            first_name=form.get('firstname', '').strip(),
            birth_date=form.get('birthdate', '').strip(),
            gender=form.get('gender', '').strip(),
        )


def encode_user_cookie(user_data: UserData) -> str:
    return COOKIE_SEPARATOR.join([
        user_data.first_name,
        user_data.last_name,
        user_data.birth_date,
        user_data.gender,
        str(user_data.age),
    ])


def decode_user_cookie(value: str) -> UserData:
    parts = value.split(COOKIE_SEPARATOR)
    if len(parts) != COOKIE_FIELD_COUNT:
        raise MalformedCookieError(value, f"expected {COOKIE_FIELD_COUNT} fields, got {len(parts)}")

    first_name, last_name, birth_date, gender, age = parts
    # the names still identify the previous entry when the age is unreadable
    try:
        age = int(age)
    except ValueError:
        age = 0

    return UserData(
        first_name=first_name,
        last_name=last_name,
        birth_date=birth_date,
        gender=gender,
        age=age,
    )
