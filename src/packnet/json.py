''' Wrapper module to handle the equivalent of :func:`json.loads` and
    :func:`json.dumps` for packnet, backed by :mod:`orjson`.

    The encoding is always compact: no whitespace between separators, keys
    in insertion order, non-ASCII characters left as-is. This matches the
    serialization used by existing peers, which matters because fragment
    boundaries are computed against the length of the encoded text.
'''

import orjson


JSONDecodeError = orjson.JSONDecodeError

# orjson.dumps returns bytes. To maintain alignment with the rest of the
# package, all 'dumps' methods here do so as well; use :func:`dumps_text`
# when the decoded string is needed.

dumps = orjson.dumps
loads = orjson.loads


def dumps_text(value):
    """ Return the compact JSON encoding of *value* as a string.
    """

    return orjson.dumps(value).decode()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
