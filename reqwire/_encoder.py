# This contains the BodyEncoder class, which turns a RequestBody description
# into a content-type override plus the bytes to send. It does no I/O of its
# own (apart from reading StreamSource contents when asked for them), so you
# can hand the payload to whatever HTTP stack you like.

import codecs
import logging

from ._body import (
    Empty, Form, FormFile, MultipartMixed, Raw, StreamSource, Text,
)
from ._boundary import BoundaryGenerator
from ._content_type import ContentType
from ._writers import WriteContext, write_multipart, write_urlencoded

# Everything in __all__ gets re-exported as part of the reqwire public API.
__all__ = [
    "BodyEncoder",
    "Payload",
    "encode_body",
    "DEFAULT_ENCODING",
    "DEFAULT_CHUNK_SIZE",
]

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

# How much we ask a StreamSource for per read() call.
DEFAULT_CHUNK_SIZE = 64 * 1024

URLENCODED = ContentType("application", "x-www-form-urlencoded")


class Payload:
    """The bytes of an encoded body, produced lazily.

    Iterating over a payload yields :class:`bytes` chunks; together they make
    up the body. A payload can only be consumed once, since it may be pulling
    from a :class:`StreamSource`.

    If iteration raises (e.g. :exc:`StreamReadFailure`), whatever chunks were
    already produced are not a valid body and should be thrown away.

    """

    def __init__(self, chunks):
        self._chunks = iter(chunks)
        self._consumed = False

    def __iter__(self):
        if self._consumed:
            raise RuntimeError("Payload can only be consumed once")
        self._consumed = True
        return self._chunks

    def write_to(self, write):
        """Pass every chunk to ``write``, e.g. ``sock.sendall``."""
        for chunk in self:
            write(chunk)

    def read_all(self):
        return b"".join(self)

    __bytes__ = read_all


def _streams_in(parts):
    for part in parts:
        if type(part) is FormFile:
            files = [part.file]
        elif type(part) is MultipartMixed:
            files = part.files
        else:
            continue
        for file in files:
            if type(file.content) is StreamSource:
                yield file.content


class BodyEncoder:
    """Encodes request bodies.

    Args:
        random: A :class:`random.Random` (or anything with a compatible
            ``randrange`` method) used to draw multipart boundaries. Pass one
            with a fixed seed to get byte-for-byte reproducible output. If
            omitted, the encoder makes its own, privately seeded instance.
            Either way the encoder owns it; don't share one encoder between
            threads.
        name_value_content_type: If not None, a :class:`ContentType` (or
            media-type string) that is sent as the ``Content-Type`` of every
            plain field in a ``multipart/form-data`` body. By default plain
            fields carry no ``Content-Type`` header.
        chunk_size: How many bytes to request per ``read()`` when copying a
            :class:`StreamSource`.

    """

    def __init__(self, random=None, *, name_value_content_type=None,
                 chunk_size=DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(
                "chunk_size must be positive, not {}".format(chunk_size))
        if name_value_content_type is not None:
            name_value_content_type = ContentType.coerce(
                name_value_content_type)
        self._boundaries = BoundaryGenerator(random)
        self._name_value_content_type = name_value_content_type
        self._chunk_size = chunk_size

    def encode(self, body, default_encoding=DEFAULT_ENCODING):
        """Encode ``body``.

        Returns a tuple ``(content_type, payload)``, where ``content_type`` is
        the :class:`ContentType` that must be sent with the payload (or None
        if the body doesn't dictate one) and ``payload`` is a
        :class:`Payload`.

        Everything that can be checked without producing the body is checked
        here, before the first byte exists.

        """
        # Fail now on an unknown encoding, rather than halfway through.
        codecs.lookup(default_encoding)
        try:
            encoder = self._ENCODERS[type(body)]
        except KeyError:
            raise TypeError(
                "expected Empty, Raw, Text or Form, not {}"
                .format(type(body).__name__)) from None
        return encoder(self, body, default_encoding)

    def _encode_empty(self, body, encoding):
        logger.debug("encoding empty body")
        return None, Payload([])

    def _encode_raw(self, body, encoding):
        logger.debug("encoding raw body (%d bytes)", len(body.data))
        return None, Payload([body.data])

    def _encode_text(self, body, encoding):
        encoding = body.encoding or encoding
        logger.debug("encoding text body as %s", encoding)
        return None, Payload([body.text.encode(encoding)])

    def _encode_form(self, body, encoding):
        if not body.parts:
            logger.debug("encoding empty form")
            return None, Payload([])
        ctx = WriteContext(encoding, self._chunk_size, self._boundaries,
                           self._name_value_content_type)
        if body.is_urlencoded:
            logger.debug("encoding %d form fields as %s",
                         len(body.parts), URLENCODED)
            # Small and pure, so do it now and fail early on unencodable text.
            return URLENCODED, Payload(list(write_urlencoded(body.parts, ctx)))
        sources = list(_streams_in(body.parts))
        if len({id(source) for source in sources}) != len(sources):
            raise RuntimeError("StreamSource used more than once in a form")
        for source in sources:
            if source.consumed:
                raise RuntimeError("StreamSource can only be read once")
        boundary = self._boundaries.next_boundary()
        content_type = ContentType("multipart", "form-data",
                                   boundary=boundary)
        logger.debug("encoding %d form parts as %s",
                     len(body.parts), content_type)
        return content_type, Payload(
            write_multipart(body.parts, boundary, ctx))

    _ENCODERS = {
        Empty: _encode_empty,
        Raw: _encode_raw,
        Text: _encode_text,
        Form: _encode_form,
    }


def encode_body(body, default_encoding=DEFAULT_ENCODING, *, random=None,
                name_value_content_type=None, chunk_size=DEFAULT_CHUNK_SIZE):
    """Encode ``body`` with a one-off :class:`BodyEncoder`.

    See :meth:`BodyEncoder.encode` for what comes back.

    """
    encoder = BodyEncoder(random,
                          name_value_content_type=name_value_content_type,
                          chunk_size=chunk_size)
    return encoder.encode(body, default_encoding)
