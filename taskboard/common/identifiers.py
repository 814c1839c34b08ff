from uuid import UUID, uuid4

from taskboard.common.exceptions import InvalidIdentifierError, ResourceType

IDENTIFIER_FIELDS = ("id", "_id")


def generate_id() -> str:
    return str(uuid4())


def is_valid_id(value: str) -> bool:
    """Only canonical lowercase hyphenated UUIDs are accepted, so every id maps to one key."""
    try:
        return str(UUID(value)) == value
    except (ValueError, TypeError, AttributeError):
        return False


def validate_id(resource_type: ResourceType, value: str) -> str:
    if not is_valid_id(value):
        raise InvalidIdentifierError(resource_type, value)
    return value


def strip_identifier_fields(payload: dict) -> dict:
    return {key: value for key, value in payload.items() if key not in IDENTIFIER_FIELDS}
