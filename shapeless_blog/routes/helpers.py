from datetime import datetime, timezone

from flask import request

from ..errors import InvalidInputError

DATE_FORMAT = '%Y-%m-%d'


def json_body():
    """The request's JSON object, or InvalidInputError."""
    if not request.is_json:
        raise InvalidInputError('Expected JSON data')
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError('Expected a JSON object')
    return data


def required_str(data, key):
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidInputError(f'{key} is required and must be a string')
    return value


def optional_str(data, key):
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidInputError(f'{key} must be a string')
    return value


def tag_list(data, required=True):
    value = data.get('tags')
    if value is None and not required:
        return None
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise InvalidInputError('tags must be a list of strings')
    return value


def optional_version(data):
    value = data.get('version')
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError('version must be an integer')
    return value


def parse_date(value):
    """`YYYY-MM-DD` to midnight UTC."""
    try:
        return datetime.strptime(value, DATE_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError) as e:
        raise InvalidInputError('invalid time string') from e
