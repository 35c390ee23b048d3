import re

__all__ = ["LineBuffer"]


# Operations we want to support:
# - find the next line terminator, which for text/event-stream is any of
#   \r\n, \r or \n -- or wait until there is one
# - cope with a \r\n that got split across two reads: a \r at the very end
#   of the buffer might be half of one, so we can't act on it until we see
#   the next byte (or the end of the stream)
# Goals:
# - worst case, do this in O(n) where n is the number of bytes processed
# Plan:
# - store a bytearray plus how far we've already searched, so that a long
#   line arriving one byte at a time doesn't get rescanned from the start
#   on every call
#
# Splitting bytes before decoding is safe for UTF-8: \r and \n never appear
# inside a multi-byte sequence.

line_end_re = re.compile(b"\r\n|\r|\n")


class LineBuffer:
    def __init__(self):
        self._data = bytearray()
        self._next_line_search = 0
        self._closed = False

    def __iadd__(self, byteslike):
        if self._closed:
            raise RuntimeError("received close, then received more data?")
        self._data += byteslike
        return self

    @property
    def closed(self):
        return self._closed

    def close(self):
        self._closed = True

    def _extract(self, end, skip):
        out = bytes(self._data[:end])
        del self._data[:end + skip]
        self._next_line_search = 0
        return out

    def maybe_extract_line(self):
        """
        Extract the first line, without its terminator, if it is completed
        in the buffer. Returns None if there is no complete line yet.

        An unterminated line left over when the stream is closed is never
        returned: the event stream format says to throw it away.
        """
        match = line_end_re.search(self._data, self._next_line_search)
        if match is None:
            self._next_line_search = len(self._data)
            return None
        start, end = match.span()
        if end == len(self._data) and match.group() == b"\r" and not self._closed:
            # Might be the first half of a \r\n.
            self._next_line_search = start
            return None
        return self._extract(start, end - start)
