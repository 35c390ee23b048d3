import re

from ._abnf import boundary, media_type, parameter_item, token
from ._util import InvalidContentType, validate

__all__ = ["ContentType"]

token_re = re.compile(token)
boundary_re = re.compile(boundary)
media_type_re = re.compile(media_type)
parameter_item_re = re.compile(parameter_item)
param_value_re = re.compile(r"[\t -~\x80-\uffff]*")
quoted_pair_re = re.compile(r"\\(.)", re.DOTALL)


def _unquote(value):
    if value.startswith('"'):
        return quoted_pair_re.sub(r"\1", value[1:-1])
    return value


def _quote(value):
    return '"{}"'.format(value.replace("\\", "\\\\").replace('"', '\\"'))


def _format_parameter(name, value):
    if token_re.fullmatch(value):
        return "{}={}".format(name, value)
    return "{}={}".format(name, _quote(value))


class ContentType:
    """A media type, as carried by a ``Content-Type`` header.

    Fields:

    .. attribute:: type

       The top-level type, e.g. ``"text"``. Always lowercase.

    .. attribute:: subtype

       The subtype, e.g. ``"plain"``. Always lowercase.

    .. attribute:: charset

       The ``charset`` parameter as given, or None. It is compared and
       serialized in lowercase.

    .. attribute:: boundary

       The ``boundary`` parameter, or None. It is always serialized as a
       quoted-string.

    .. attribute:: params

       Any other parameters, as a tuple of ``(name, value)`` pairs in the
       order they were given. Names are lowercase; values are unquoted.

    Instances are immutable and hashable. Anything that isn't a valid
    media type (per RFC 7231) raises :exc:`InvalidContentType` at
    construction time, so a malformed type never makes it into a payload.

    """

    __slots__ = ("type", "subtype", "charset", "boundary", "params")

    def __init__(self, type, subtype, charset=None, boundary=None, params=()):
        validate(token_re, type, "illegal media type {!r}", type)
        validate(token_re, subtype, "illegal media subtype {!r}", subtype)
        if charset is not None:
            validate(token_re, charset, "illegal charset {!r}", charset)
        if boundary is not None:
            validate(boundary_re, boundary, "illegal boundary {!r}", boundary)
        normalized = []
        for name, value in params:
            validate(token_re, name, "illegal parameter name {!r}", name)
            name = name.lower()
            validate(param_value_re, value,
                     "illegal value for parameter {!r}", name)
            if name in ("charset", "boundary"):
                raise InvalidContentType(
                    "{} must be passed as its own argument".format(name))
            normalized.append((name, value))
        object.__setattr__(self, "type", type.lower())
        object.__setattr__(self, "subtype", subtype.lower())
        object.__setattr__(self, "charset", charset)
        object.__setattr__(self, "boundary", boundary)
        object.__setattr__(self, "params", tuple(normalized))

    @classmethod
    def parse(cls, text):
        """Parse a ``Content-Type`` header value.

        Type, subtype and parameter names are matched case-insensitively.
        A repeated ``charset`` or ``boundary`` parameter is an error.

        """
        matches = validate(media_type_re, text.strip(" \t"),
                           "malformed media type {!r}",
                           text)
        charset = None
        boundary = None
        params = []
        for match in parameter_item_re.finditer(matches["parameters"]):
            name = match.group("name").lower()
            value = _unquote(match.group("value"))
            if name == "charset":
                if charset is not None:
                    raise InvalidContentType("repeated charset parameter")
                charset = value
            elif name == "boundary":
                if boundary is not None:
                    raise InvalidContentType("repeated boundary parameter")
                boundary = value
            else:
                params.append((name, value))
        return cls(matches["type"], matches["subtype"], charset=charset,
                   boundary=boundary, params=params)

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        raise TypeError(
            "expected ContentType or str, not {}".format(type(value).__name__))

    @property
    def media_type(self):
        return "{}/{}".format(self.type, self.subtype)

    def __setattr__(self, name, value):
        raise AttributeError("ContentType is immutable")

    def __str__(self):
        pieces = [self.media_type]
        if self.charset is not None:
            pieces.append("charset={}".format(self.charset.lower()))
        if self.boundary is not None:
            pieces.append("boundary={}".format(_quote(self.boundary)))
        for name, value in self.params:
            pieces.append(_format_parameter(name, value))
        return "; ".join(pieces)

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, str(self))

    def _key(self):
        charset = self.charset.lower() if self.charset is not None else None
        return (self.type, self.subtype, charset, self.boundary, self.params)

    def __eq__(self, other):
        if not isinstance(other, ContentType):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())
