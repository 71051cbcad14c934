"""
Validation utilities for incoming request parameters.
"""
import re

# Largest integer the database drivers accept as a bound parameter.
PROVINCE_ID_MIN = -(2 ** 63)
PROVINCE_ID_MAX = 2 ** 63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)


def normalize_search_text(raw_search):
    """
    Normalize the free-text search parameter.

    Args:
        raw_search: Untyped value from the query string (may be None)

    Returns:
        Trimmed search text, or None when empty or whitespace-only
    """
    if raw_search is None:
        return None
    search = str(raw_search).strip()
    if not search:
        return None
    return search


def parse_province_id(raw_province):
    """
    Convert a province parameter to an int. Anything that is not an ASCII
    integer in the signed 64-bit range is treated as absent rather than
    rejected.
    """
    if raw_province is None or isinstance(raw_province, bool):
        return None
    if isinstance(raw_province, int):
        province_id = raw_province
    else:
        text = str(raw_province).strip()
        if not _INTEGER_RE.fullmatch(text):
            return None
        province_id = int(text)
    if not PROVINCE_ID_MIN <= province_id <= PROVINCE_ID_MAX:
        return None
    return province_id


def extract_new_user(payload):
    """
    Extract and validate the fields for a new user from a JSON payload.

    Returns a ``(fields, error)`` tuple; exactly one of them is None.
    """
    if not isinstance(payload, dict):
        return None, 'JSON object body required'

    fields = {}
    for field in ('firstname', 'lastname'):
        value = payload.get(field)
        value = str(value).strip() if value is not None else ''
        if not value or len(value) > 100:
            return None, f'{field} is required (max 100 characters)'
        fields[field] = value

    raw_province = payload.get('province_id')
    if raw_province in (None, ''):
        fields['province_id'] = None
    else:
        province_id = parse_province_id(raw_province)
        if province_id is None:
            return None, 'province_id must be an integer'
        fields['province_id'] = province_id

    return fields, None
