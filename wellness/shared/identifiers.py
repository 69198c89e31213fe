import uuid

from beanie import PydanticObjectId
from bson import ObjectId

from wellness.shared.exceptions import InvalidIdentifierException


def parse_object_id(value: str, resource: str) -> PydanticObjectId:
    """Parse a path or body identifier, rejecting malformed ones up front."""
    if not value or not ObjectId.is_valid(value):
        raise InvalidIdentifierException(resource)
    return PydanticObjectId(value)


def is_object_id(value: str) -> bool:
    return bool(value) and ObjectId.is_valid(value)


def new_identifier() -> str:
    """Fresh identifier for template sections and questions."""
    return uuid.uuid4().hex
