""" Decoding of the JSON configuration files. The parser is whichever of
    msgspec, orjson, or the standard library is available, in that order;
    :data:`DecodeError` is the matching exception class.
"""

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


if msgspec is not None:
    loads = msgspec.json.Decoder().decode
    DecodeError = msgspec.DecodeError
elif orjson is not None:
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError
else:
    loads = json.loads
    DecodeError = json.JSONDecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
