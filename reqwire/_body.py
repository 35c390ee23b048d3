# The declarative description of a request body. Each kind of thing is its
# own small class, and code that consumes them dispatches on type(obj)
# against an explicit table (see _writers.WRITERS), so an unhandled variant
# is caught up front instead of silently falling through.
#
# Don't subclass these. Stuff will break.

from ._content_type import ContentType
from ._util import StreamReadFailure

# Everything in __all__ gets re-exported as part of the reqwire public API.
__all__ = [
    "Plain",
    "Binary",
    "StreamSource",
    "File",
    "NameValue",
    "FormFile",
    "MultipartMixed",
    "Empty",
    "Raw",
    "Text",
    "Form",
]


class _Variant:
    __slots__ = ()
    _fields = []
    _defaults = {}

    def __init__(self, *args, **kwargs):
        if len(args) > len(self._fields):
            raise TypeError(
                "{} takes at most {} positional arguments ({} given)"
                .format(self.__class__.__name__, len(self._fields), len(args)))
        for field, arg in zip(self._fields, args):
            if field in kwargs:
                raise TypeError(
                    "got multiple values for {} of {}"
                    .format(field, self.__class__.__name__))
            kwargs[field] = arg
        allowed = set(self._fields)
        for kwarg in kwargs:
            if kwarg not in allowed:
                raise TypeError(
                    "unrecognized kwarg {} for {}"
                    .format(kwarg, self.__class__.__name__))
        for field in self._fields:
            if field not in kwargs and field not in self._defaults:
                raise TypeError(
                    "missing required kwarg {} for {}"
                    .format(field, self.__class__.__name__))
        for field in self._fields:
            value = kwargs[field] if field in kwargs else self._defaults[field]
            object.__setattr__(self, field, value)
        self._validate()

    def _validate(self):
        pass

    def _replace_field(self, field, value):
        object.__setattr__(self, field, value)

    def __setattr__(self, name, value):
        raise AttributeError(
            "{} is immutable".format(self.__class__.__name__))

    def __repr__(self):
        name = self.__class__.__name__
        kwarg_strs = ["{}={!r}".format(field, getattr(self, field))
                      for field in self._fields]
        kwarg_str = ", ".join(kwarg_strs)
        return "{}({})".format(name, kwarg_str)

    # Useful for tests
    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, field) == getattr(other, field)
                   for field in self._fields)

    # This is an unhashable type.
    __hash__ = None


def _check_str(owner, field, value):
    if not isinstance(value, str):
        raise TypeError(
            "{}.{} must be str, not {}"
            .format(owner, field, type(value).__name__))


################################################################
# File contents
################################################################

class _FileContent(_Variant):
    __slots__ = ()


class Plain(_FileContent):
    """Text content, embedded verbatim using the body's character encoding."""

    __slots__ = ("text",)
    _fields = ["text"]

    def _validate(self):
        _check_str("Plain", "text", self.text)


class Binary(_FileContent):
    """Binary content. Always sent with ``Content-Transfer-Encoding:
    base64`` when embedded in a multipart body."""

    __slots__ = ("data",)
    _fields = ["data"]

    def _validate(self):
        if isinstance(self.data, (str, int)):
            raise TypeError(
                "Binary.data must be bytes-like, not {}"
                .format(type(self.data).__name__))
        self._replace_field("data", bytes(self.data))


class StreamSource:
    """Content read lazily from a binary file-like object.

    The stream is read forward, in chunks, at most once; its bytes are never
    held in memory all at once. The encoder borrows it: closing it is your
    job. Using the source as a context manager closes the stream on exit::

        with StreamSource(open("big.iso", "rb")) as source:
            ct, payload = encode_body(Form([FormFile("image", (
                "big.iso", "application/octet-stream", source))]))
            payload.write_to(sock.sendall)

    """

    __slots__ = ("stream", "_consumed")

    def __init__(self, stream):
        if not hasattr(stream, "read"):
            raise TypeError(
                "StreamSource needs an object with a read() method, not {}"
                .format(type(stream).__name__))
        self.stream = stream
        self._consumed = False

    @property
    def consumed(self):
        return self._consumed

    def read_chunks(self, chunk_size):
        if self._consumed:
            raise RuntimeError("StreamSource can only be read once")
        self._consumed = True
        while True:
            try:
                chunk = self.stream.read(chunk_size)
            except OSError as exc:
                raise StreamReadFailure(str(exc)) from exc
            if not chunk:
                return
            yield bytes(chunk)

    def close(self):
        self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return "{}(stream={!r})".format(self.__class__.__name__, self.stream)


def _coerce_content(content):
    if isinstance(content, (_FileContent, StreamSource)):
        return content
    if isinstance(content, str):
        return Plain(content)
    if isinstance(content, (bytes, bytearray, memoryview)):
        return Binary(content)
    raise TypeError(
        "file content must be Plain, Binary, StreamSource, str or bytes, "
        "not {}".format(type(content).__name__))


class File(_Variant):
    """One file to upload: a filename, a content type and the content.

    ``content_type`` may be a :class:`ContentType` or a string, which is
    parsed immediately (so a malformed one raises
    :exc:`InvalidContentType` here, long before anything is encoded).
    ``content`` may be one of :class:`Plain`, :class:`Binary` or
    :class:`StreamSource`; a bare ``str`` is taken as :class:`Plain` and
    bare bytes as :class:`Binary`.

    """

    __slots__ = ("filename", "content_type", "content")
    _fields = ["filename", "content_type", "content"]

    def _validate(self):
        _check_str("File", "filename", self.filename)
        self._replace_field("content_type",
                            ContentType.coerce(self.content_type))
        self._replace_field("content", _coerce_content(self.content))


def _coerce_file(file):
    if isinstance(file, File):
        return file
    if isinstance(file, tuple):
        return File(*file)
    raise TypeError(
        "expected File or (filename, content_type, content) tuple, not {}"
        .format(type(file).__name__))


################################################################
# Form parts
################################################################

class _BodyPart(_Variant):
    __slots__ = ()


class NameValue(_BodyPart):
    """A plain form field, like ``<input name="name" value="value">``."""

    __slots__ = ("name", "value")
    _fields = ["name", "value"]

    def _validate(self):
        _check_str("NameValue", "name", self.name)
        _check_str("NameValue", "value", self.value)


class FormFile(_BodyPart):
    """A single file attached under one form field."""

    __slots__ = ("name", "file")
    _fields = ["name", "file"]

    def _validate(self):
        _check_str("FormFile", "name", self.name)
        self._replace_field("file", _coerce_file(self.file))


class MultipartMixed(_BodyPart):
    """Several files under one form field, like a multi-file-browse
    control. Sent as a ``multipart/mixed`` body nested inside the
    ``multipart/form-data`` one."""

    __slots__ = ("name", "files")
    _fields = ["name", "files"]

    def _validate(self):
        _check_str("MultipartMixed", "name", self.name)
        self._replace_field(
            "files", tuple(_coerce_file(file) for file in self.files))


################################################################
# Request bodies
################################################################

class _RequestBody(_Variant):
    __slots__ = ()


class Empty(_RequestBody):
    __slots__ = ()


class Raw(_RequestBody):
    __slots__ = ("data",)
    _fields = ["data"]

    def _validate(self):
        if isinstance(self.data, (str, int)):
            raise TypeError(
                "Raw.data must be bytes-like, not {}"
                .format(type(self.data).__name__))
        self._replace_field("data", bytes(self.data))


class Text(_RequestBody):
    """A string body. If ``encoding`` is None, the encoder's default
    character encoding is used."""

    __slots__ = ("text", "encoding")
    _fields = ["text", "encoding"]
    _defaults = {"encoding": None}

    def _validate(self):
        _check_str("Text", "text", self.text)


class Form(_RequestBody):
    """An ordered list of form parts. Order is preserved on the wire.

    If every part is a :class:`NameValue`, the form is sent as
    ``application/x-www-form-urlencoded``; otherwise it's sent as
    ``multipart/form-data``.

    """

    __slots__ = ("parts",)
    _fields = ["parts"]

    def _validate(self):
        parts = tuple(self.parts)
        for part in parts:
            if not isinstance(part, _BodyPart):
                raise TypeError(
                    "form parts must be NameValue, FormFile or "
                    "MultipartMixed, not {}".format(type(part).__name__))
        self._replace_field("parts", parts)

    @property
    def is_urlencoded(self):
        return all(type(part) is NameValue for part in self.parts)
