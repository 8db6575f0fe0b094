# Used as mode="before" field validators: the raw value may be anything the env/.env
# loader or a caller passed, so non-strings are returned untouched for pydantic to reject.

def to_uppercase(value):
    """' debug' -> 'DEBUG'."""
    if isinstance(value, str):
        return value.strip().upper()
    return value

def to_lowercase(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value
