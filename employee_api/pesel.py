"""PESEL (Polish national identity number) checksum."""

WEIGHTS = (1, 3, 7, 9, 1, 3, 7, 9, 1, 3)
PESEL_LENGTH = 11


def control_digit(first_ten: str) -> int:
    """Return the control digit for the first ten digits of a PESEL."""
    total = sum(int(digit) * weight for digit, weight in zip(first_ten, WEIGHTS))
    return (10 - total % 10) % 10


def is_pesel_valid(value) -> bool:
    """Check that ``value`` is 11 ASCII digits with a matching control digit.

    Malformed input of any kind yields ``False`` rather than an exception.
    """
    if not isinstance(value, str) or len(value) != PESEL_LENGTH:
        return False
    if not (value.isascii() and value.isdigit()):
        return False
    return control_digit(value[:10]) == int(value[10])
