# Interpretation of text/event-stream (Server-Sent Events) bodies, following
#
#     https://html.spec.whatwg.org/multipage/server-sent-events.html#event-stream-interpretation
#
# There are two layers. EventStreamParser is the state machine proper: it
# takes already-split text lines, one at a time, and hands back an Event
# whenever a blank line completes one. EventStreamReader sits on top and does
# the byte-level work for you (BOM stripping, splitting on CR / LF / CRLF,
# decoding), behind a receive_data() / next_event() interface.
#
# Nothing in here raises on bad input. Lines we don't understand are skipped,
# which is what the format asks for.

import logging
import re

from ._linebuffer import LineBuffer
from ._util import make_sentinel

# Everything in __all__ gets re-exported as part of the reqwire public API.
__all__ = [
    "Event",
    "EventStreamParser",
    "EventStreamReader",
    "parse_sse",
    "iter_sse_bytes",
    "NEED_DATA",
    "END_OF_STREAM",
]

logger = logging.getLogger(__name__)

NEED_DATA = make_sentinel("NEED_DATA")
END_OF_STREAM = make_sentinel("END_OF_STREAM")

DEFAULT_EVENT_TYPE = "message"

UTF8_BOM = b"\xef\xbb\xbf"

retry_re = re.compile(r"[0-9]+")


class Event:
    """One dispatched server-sent event.

    Fields:

    .. attribute:: data

       The event's data lines, joined with ``"\\n"``.

    .. attribute:: event_type

       The value of the last ``event:`` field before the event was
       dispatched, or ``"message"`` if there was none (or it was empty).

    .. attribute:: last_event_id

       The value of the most recent ``id:`` field seen in the stream so far,
       which may have come from an earlier event. ``""`` if there hasn't
       been one.

    """

    __slots__ = ("data", "event_type", "last_event_id")

    def __init__(self, data, event_type=DEFAULT_EVENT_TYPE, last_event_id=""):
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "event_type", event_type)
        object.__setattr__(self, "last_event_id", last_event_id)

    def __setattr__(self, name, value):
        raise AttributeError("Event is immutable")

    def __repr__(self):
        return "{}(data={!r}, event_type={!r}, last_event_id={!r})".format(
            self.__class__.__name__,
            self.data,
            self.event_type,
            self.last_event_id,
        )

    def _key(self):
        return (self.data, self.event_type, self.last_event_id)

    # Useful for tests
    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())


def _strip_line_ending(line):
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\r", "\n")):
        return line[:-1]
    return line


class EventStreamParser:
    """The event stream state machine.

    One parser interprets one stream, once. To start over, make a new one.

    Attributes:
        last_event_id: The last event ID seen so far. Survives dispatch.
        reconnection_time: The last valid ``retry:`` value, in milliseconds,
            or None if the stream hasn't sent one.

    """

    def __init__(self):
        self._data_lines = []
        self._event_type = DEFAULT_EVENT_TYPE
        self.last_event_id = ""
        self.reconnection_time = None

    def feed_line(self, line):
        """Process one line, and return the :class:`Event` it completes, if
        any, or else None.

        ``line`` should not contain a line terminator; if it ends with one
        (as lines read from a text file do), that one is removed.

        """
        line = _strip_line_ending(line)
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None
        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        handler = self._FIELDS.get(name)
        if handler is None:
            logger.debug("ignoring unknown field %r", name)
        else:
            handler(self, value)
        return None

    def events(self, lines):
        """Lazily yield the events completed by ``lines``.

        A trailing event that isn't followed by a blank line is never
        yielded.

        """
        for line in lines:
            event = self.feed_line(line)
            if event is not None:
                yield event

    def _dispatch(self):
        event = None
        if self._data_lines:
            event = Event(
                data="\n".join(self._data_lines),
                event_type=self._event_type or DEFAULT_EVENT_TYPE,
                last_event_id=self.last_event_id,
            )
            logger.debug("dispatching %r", event)
        self._data_lines = []
        self._event_type = DEFAULT_EVENT_TYPE
        return event

    def _field_data(self, value):
        self._data_lines.append(value)

    def _field_event(self, value):
        self._event_type = value

    def _field_id(self, value):
        if "\0" in value:
            logger.debug("ignoring id containing NUL")
            return
        self.last_event_id = value

    def _field_retry(self, value):
        if not retry_re.fullmatch(value):
            logger.debug("ignoring malformed retry %r", value)
            return
        self.reconnection_time = int(value)

    _FIELDS = {
        "data": _field_data,
        "event": _field_event,
        "id": _field_id,
        "retry": _field_retry,
    }


def parse_sse(lines):
    """Lazily interpret an iterable of lines as an event stream.

    Each call starts from a fresh :class:`EventStreamParser`.

    """
    return EventStreamParser().events(lines)


class EventStreamReader:
    """Incrementally turns the raw bytes of a ``text/event-stream`` body into
    :class:`Event` objects.

    Feed it bytes with :meth:`receive_data` (``b""`` means the stream ended),
    then call :meth:`next_event` until it returns :data:`NEED_DATA`, or
    :data:`END_OF_STREAM` once the stream has ended and everything has been
    processed. An event that was still being built when the stream ended is
    discarded.

    """

    def __init__(self, encoding="utf-8"):
        self.parser = EventStreamParser()
        self._encoding = encoding
        self._buffer = LineBuffer()
        # Bytes we are holding back until we know whether the stream starts
        # with a byte order mark.
        self._head = b""
        self._awaiting_bom = True

    @property
    def last_event_id(self):
        return self.parser.last_event_id

    @property
    def reconnection_time(self):
        return self.parser.reconnection_time

    def receive_data(self, data):
        if not data:
            if self._awaiting_bom:
                self._release_head()
            self._buffer.close()
            return
        if not self._awaiting_bom:
            self._buffer += data
            return
        self._head += bytes(data)
        if len(self._head) < len(UTF8_BOM) and UTF8_BOM.startswith(self._head):
            return
        self._release_head()

    def _release_head(self):
        head = self._head
        if head.startswith(UTF8_BOM):
            head = head[len(UTF8_BOM):]
        self._awaiting_bom = False
        self._head = b""
        self._buffer += head

    def next_event(self):
        while True:
            line = self._buffer.maybe_extract_line()
            if line is None:
                if self._buffer.closed:
                    return END_OF_STREAM
                return NEED_DATA
            event = self.parser.feed_line(
                line.decode(self._encoding, errors="replace"))
            if event is not None:
                return event


def iter_sse_bytes(chunks, encoding="utf-8"):
    """Lazily yield the events in a body that arrives as an iterable of byte
    chunks (for example, a streaming HTTP response)."""
    reader = EventStreamReader(encoding)
    for chunk in chunks:
        if not chunk:
            continue
        reader.receive_data(chunk)
        while True:
            event = reader.next_event()
            if event is NEED_DATA:
                break
            yield event
    reader.receive_data(b"")
    while True:
        event = reader.next_event()
        if event is END_OF_STREAM:
            return
        yield event
