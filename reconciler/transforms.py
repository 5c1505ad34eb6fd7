import hashlib
import json


def compute_hash(payload):
    canonical = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()


def is_empty(value):
    """Lodash-style emptiness: None and empty containers/strings are empty, numbers are not."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False


def omit_typename(value):
    """Recursively drop GraphQL ``__typename`` keys."""
    if isinstance(value, dict):
        return {k: omit_typename(v) for k, v in value.items() if k != '__typename'}
    if isinstance(value, list):
        return [omit_typename(v) for v in value]
    return value


def unwrap_list(value):
    """Accepts a list or a ``{"data": [...]}`` envelope; anything else is an empty list."""
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and isinstance(value.get('data'), list):
        return value['data']
    return []


def require_list(value, field):
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{field}: expected a list, got {type(value).__name__}")
    return list(value)


def to_int(value):
    """Parse an id-like value into an int, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        token = value.strip()
        if not token:
            return None
        try:
            return int(token)
        except ValueError:
            try:
                number = float(token)
            except ValueError:
                return None
            return int(number) if number.is_integer() else None
    return None
