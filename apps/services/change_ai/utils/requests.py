from typing import Any

from libs.core.exceptions import MissingFieldsError


def require_fields(**fields: Any) -> None:
    """
    Raise MissingFieldsError naming every empty field.

    Keyword names are the wire names, e.g. require_fields(html=body.html).
    None and empty strings count as missing.
    """
    missing = [
        name for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise MissingFieldsError(missing)
