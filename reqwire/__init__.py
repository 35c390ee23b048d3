# Wire formats for HTTP request and response bodies, containing no networking
# code at all: multipart/form-data and x-www-form-urlencoded request bodies
# on the way out, text/event-stream (Server-Sent Events) on the way in. You
# bring the HTTP stack; we get the bytes right.

from ._util import WireFormatError, InvalidContentType, StreamReadFailure
from ._content_type import ContentType
from ._boundary import BoundaryGenerator, BOUNDARY_LENGTH, BOUNDARY_ALPHABET
from ._body import *
from ._writers import urlencode
from ._encoder import *
from ._sse import *

from ._version import __version__

from . import _body, _encoder, _sse

__all__ = [
    "WireFormatError",
    "InvalidContentType",
    "StreamReadFailure",
    "ContentType",
    "BoundaryGenerator",
    "BOUNDARY_LENGTH",
    "BOUNDARY_ALPHABET",
    "urlencode",
]
__all__ += _body.__all__
__all__ += _encoder.__all__
__all__ += _sse.__all__
