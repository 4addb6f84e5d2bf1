''' Select the most performant available JSON library and expose a common
    :func:`dumps`, :func:`loads` and :func:`pretty` interface. All encoders
    return bytes, whichever library is doing the work.

    The command line tool uses this module to render the version and command
    catalogues; nothing on the wire is JSON.
'''

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
    backend = 'msgspec'
    _encoder = msgspec.json.Encoder()
    _decoder = msgspec.json.Decoder()
    dumps = _encoder.encode
    loads = _decoder.decode

    def pretty(thing):
        return msgspec.json.format(dumps(thing), indent=2)

elif orjson is not None:
    backend = 'orjson'
    dumps = orjson.dumps
    loads = orjson.loads

    def pretty(thing):
        return orjson.dumps(thing, option=orjson.OPT_INDENT_2)

else:
    backend = 'json'
    loads = json.loads

    def dumps(thing):
        return json.dumps(thing, ensure_ascii=False).encode()

    def pretty(thing):
        return json.dumps(thing, ensure_ascii=False, indent=2).encode()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
