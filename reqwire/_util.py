__all__ = [
    "WireFormatError",
    "InvalidContentType",
    "StreamReadFailure",
    "validate",
    "make_sentinel",
]


class WireFormatError(Exception):
    """Exception indicating that a body could not be put on the wire.

    This is an abstract base class, with two concrete subclasses:
    :exc:`InvalidContentType`, which indicates that a media type you supplied
    is malformed, and :exc:`StreamReadFailure`, which indicates that reading
    from a :class:`StreamSource` failed while its content was being copied
    into a payload.

    In addition to the normal :exc:`Exception` features, it has one attribute:

    .. attribute:: error_status_hint

       This gives a suggestion as to what status code a server might have
       used to reject the request, had the malformed body been sent anyway.
       The default is 400 Bad Request.

    When one of these is raised partway through producing a payload, any
    bytes already handed to the transport are garbage and must be discarded;
    there is no way to resume an encode.

    """

    def __init__(self, msg, error_status_hint=400):
        if type(self) is WireFormatError:
            raise TypeError("tried to directly instantiate WireFormatError")
        Exception.__init__(self, msg)
        self.error_status_hint = error_status_hint


class InvalidContentType(WireFormatError):
    def __init__(self, msg, error_status_hint=415):
        WireFormatError.__init__(self, msg, error_status_hint)


class StreamReadFailure(WireFormatError):
    pass


def validate(regex, data, msg="malformed data", *format_args):
    match = regex.fullmatch(data)
    if not match:
        if format_args:
            msg = msg.format(*format_args)
        raise InvalidContentType(msg)
    return match.groupdict()


# Sentinel values
#
# - Inherit identity-based comparison and hashing from object
# - Have a nice repr
# - Have a *bonus property*: type(sentinel) is sentinel
#
# The bonus property is useful if you want to take the return value from
# next_event() and do some sort of dispatch based on type(event).
class _SentinelBase(type):
    def __repr__(self):
        return self.__name__


def make_sentinel(name):
    cls = _SentinelBase(name, (_SentinelBase,), {})
    cls.__class__ = cls
    return cls

