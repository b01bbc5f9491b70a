from werkzeug.datastructures import Headers
from werkzeug.http import parse_options_header


def to_headers(value):
    """
    Returns ``value`` as case-insensitive :class:`werkzeug.datastructures.Headers`. ``value`` may be ``None``, a
    mapping (including a ``requests`` ``CaseInsensitiveDict``) or a list of ``(name, value)`` tuples.
    """
    if value is None:
        return Headers()
    if isinstance(value, Headers):
        return value
    if hasattr(value, 'items'):
        return Headers([(k, v) for k, v in value.items() if v is not None])
    return Headers(list(value))


def media_type(headers):
    """
    Returns the lower-case media type of the ``Content-Type`` header without any parameters, or ``''``.
    """
    content_type = to_headers(headers).get('Content-Type')
    if not content_type:
        return ''
    mimetype, _ = parse_options_header(content_type)
    return mimetype.lower()


def ensure_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
