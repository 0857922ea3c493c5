"""Percent-encoding and path normalization for canonical requests."""

from urllib.parse import quote


def normalize_path(path: str) -> str:
    """
    Remove dot segments and collapse consecutive slashes.

    Follows RFC 3986 section 5.2.4; a leading and a trailing slash are kept.
    An empty path normalizes to ``/``.
    """
    if not path:
        return '/'
    segments = []
    for segment in path.split('/'):
        if not segment or segment == '.':
            continue
        if segment == '..':
            if segments:
                segments.pop()
        else:
            segments.append(segment)
    first = '/' if path.startswith('/') else ''
    last = '/' if path.endswith('/') and segments else ''
    return first + '/'.join(segments) + last or '/'


def quote_path(path: str) -> str:
    # Only RFC 3986 unreserved characters and '/' survive; '%' is escaped again.
    return quote(path, safe='/')


def quote_component(value: str) -> str:
    # safe='' leaves A-Z a-z 0-9 -_.~ alone, so ! ' ( ) * are escaped as well
    return quote(value, safe='')
