import uuid

from sqlalchemy.orm import class_mapper


def generate_document_id() -> str:
    """Return a random 20 character document key."""
    return uuid.uuid4().hex[:20]


def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a dictionary."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        value = getattr(obj, c.key)
        # Convert date/datetime objects to ISO format strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        result[c.key] = value
    return result


__all__ = ['generate_document_id', 'sqlalchemy_to_dict']
