import email.parser
import email.policy
import io

# Arbitrary, but fixed: every test that cares about boundaries seeds its own
# random.Random with this, so that tests can run in parallel.
SEED = 1234567765


def crlf_join(lines):
    return "\r\n".join(lines).encode("utf-8")


class RecordingStream:
    """A binary file-like object that remembers every read() it served."""

    def __init__(self, data):
        self._io = io.BytesIO(data)
        self.reads = []
        self.closed = False

    def read(self, size=-1):
        chunk = self._io.read(size)
        self.reads.append(size)
        return chunk

    def close(self):
        self.closed = True


class BrokenStream:
    """Serves ``good`` and then fails, like a socket that got reset."""

    def __init__(self, good):
        self._good = good

    def read(self, size=-1):
        if self._good:
            chunk, self._good = self._good[:size], self._good[size:]
            return chunk
        raise ConnectionResetError("connection reset by peer")


def parse_multipart(content_type, body):
    # The stdlib email package is an independent RFC 2046 parser; if it can
    # recover what we put in, so can a server.
    head = "Content-Type: {}\r\n\r\n".format(content_type).encode("ascii")
    parser = email.parser.BytesParser(policy=email.policy.HTTP)
    return parser.parsebytes(head + body)


def describe_part(part):
    return (
        part.get_param("name", header="content-disposition"),
        part.get_filename(),
        part.get_content_type(),
        part.get_payload(decode=True),
    )
