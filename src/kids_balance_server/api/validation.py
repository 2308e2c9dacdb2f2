"""Path parameter validation shared by the API routers."""

import re
from datetime import date

from litestar.exceptions import ValidationException

# Regex for valid id format (alphanumeric, underscores, hyphens)
ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_id(value: str, name: str = "user_id") -> str:
    """Validate an id path parameter.

    Args:
        value: The identifier to validate
        name: Parameter name used in the error message

    Returns:
        The validated identifier

    Raises:
        ValidationException: If the id format is invalid
    """
    if not value or len(value) > 100:
        raise ValidationException(f"Invalid {name}: must be 1-100 characters")
    if not ID_PATTERN.match(value):
        raise ValidationException(f"Invalid {name}: must be alphanumeric with _ or - only")
    return value


def parse_date_param(value: str, name: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` path or query parameter.

    Raises:
        ValidationException: If the value is not an ISO date
    """
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationException(f"Invalid {name}: expected YYYY-MM-DD") from e
