import pytest

from .._sse import *


def interpret(lines):
    return list(parse_sse(lines))


def test_stock_ticker():
    events = interpret(["data: YHOO", "data: +2", "data: 10", ""])
    assert events == [Event(data="YHOO\n+2\n10", event_type="message",
                            last_event_id="")]


def test_event_types():
    events = interpret([
        "event: add",
        "data: 73857293",
        "",
        "event: remove",
        "data: 2153",
        "",
        "data: 113411",
        "",
    ])
    assert [(e.event_type, e.data) for e in events] == [
        ("add", "73857293"),
        ("remove", "2153"),
        # the event type is reset after every dispatch
        ("message", "113411"),
    ]


def test_comments_and_ids():
    events = interpret([
        ": test stream",
        "",
        "data: first event",
        "id: 1",
        "",
        "data:second event",
        "id",
        "",
        "data:  third event",
        "",
    ])
    assert events == [
        Event("first event", "message", "1"),
        Event("second event", "message", ""),
        Event(" third event", "message", ""),
    ]


def test_empty_data_lines():
    events = interpret([
        "data",
        "",
        "data",
        "data",
        "",
        "data:",
    ])
    # the trailing "data:" is never followed by a blank line, so it is never
    # dispatched
    assert [e.data for e in events] == ["", "\n"]


def test_leading_space_is_optional():
    events = interpret(["data:test", "", "data: test", ""])
    assert [e.data for e in events] == ["test", "test"]


def test_last_event_id_persists():
    events = interpret([
        "id: 7",
        "data: a",
        "",
        "data: b",
        "",
        "id: 8",
        "data: c",
        "",
        "id: bad\0id",
        "data: d",
        "",
    ])
    assert [(e.data, e.last_event_id) for e in events] == [
        ("a", "7"),
        ("b", "7"),
        ("c", "8"),
        # ids containing NUL are ignored
        ("d", "8"),
    ]


def test_id_without_data_is_remembered():
    parser = EventStreamParser()
    assert list(parser.events(["id: 42", ""])) == []
    assert parser.last_event_id == "42"
    [event] = parser.events(["data: x", ""])
    assert event.last_event_id == "42"


def test_empty_event_type():
    parser = EventStreamParser()
    [event] = parser.events(["event:", "data: x", ""])
    assert event.event_type == "message"


def test_blank_lines_without_data_dispatch_nothing():
    assert interpret(["", "", "event: ping", "", "id: 3", ""]) == []


def test_unknown_fields_and_garbage_are_ignored():
    events = interpret([
        "foo: bar",
        "data",
        "Data: wrong case",
        ":comment with data: inside",
        "\0\1\2",
        "data: ok",
        "",
    ])
    assert events == [Event("\nok")]


def test_retry():
    parser = EventStreamParser()
    assert parser.reconnection_time is None
    list(parser.events(["retry: 3000", ""]))
    assert parser.reconnection_time == 3000
    list(parser.events(["retry: 3s", "retry: -1", "retry:", "retry: ٣"]))
    assert parser.reconnection_time == 3000
    list(parser.events(["retry:15"]))
    assert parser.reconnection_time == 15


def test_line_terminators_are_tolerated():
    events = interpret(["data: a\n", "data: b\r\n", "\n", "data: c\r", "\r\n"])
    assert [e.data for e in events] == ["a\nb", "c"]


def test_parse_sse_is_lazy():
    def lines():
        yield "data: first"
        yield ""
        raise AssertionError("read past the first event")

    events = parse_sse(lines())
    assert next(events) == Event("first")


def test_parse_sse_starts_fresh_each_call():
    lines = ["id: 1", "data: a", ""]
    assert interpret(lines)[0].last_event_id == "1"
    assert interpret(["data: b", ""])[0].last_event_id == ""


def test_event_value_semantics():
    event = Event("x", "update", "9")
    assert repr(event) == "Event(data='x', event_type='update', last_event_id='9')"
    assert event == Event(data="x", event_type="update", last_event_id="9")
    assert event != Event("x")
    assert len({event, Event("x", "update", "9")}) == 1
    with pytest.raises(AttributeError):
        event.data = "y"


def test_reader():
    reader = EventStreamReader()
    assert reader.next_event() is NEED_DATA
    reader.receive_data(b"\xef\xbb\xbfevent: greet\r\ndata: hello\r\n")
    assert reader.next_event() is NEED_DATA
    reader.receive_data(b"\r\nid: 5\rdata: a\rdata: b\r\r")
    assert reader.next_event() == Event("hello", "greet", "")
    assert reader.next_event() is NEED_DATA
    # the final \r could still be half of a \r\n
    reader.receive_data(b"retry: 10\n")
    assert reader.next_event() == Event("a\nb", "message", "5")
    assert reader.next_event() is NEED_DATA
    assert reader.last_event_id == "5"
    assert reader.reconnection_time == 10

    reader.receive_data(b"data: unfinished")
    reader.receive_data(b"")
    assert reader.next_event() is END_OF_STREAM
    assert reader.next_event() is END_OF_STREAM


def test_reader_bom_split_across_chunks():
    reader = EventStreamReader()
    reader.receive_data(b"\xef")
    reader.receive_data(b"\xbb")
    assert reader.next_event() is NEED_DATA
    reader.receive_data(b"\xbfdata: x\n\n")
    assert reader.next_event() == Event("x")


def test_reader_only_strips_leading_bom():
    events = list(iter_sse_bytes([b"data: \xef\xbb\xbfx\n\n"]))
    assert events == [Event("\ufeffx")]


def test_reader_short_stream():
    reader = EventStreamReader()
    reader.receive_data(b"\n")
    reader.receive_data(b"")
    assert reader.next_event() is END_OF_STREAM


def test_iter_sse_bytes_byte_at_a_time():
    body = "data: Åsa\r\n\r\nevent: x\r\ndata: 1\r\ndata: 2\r\n\r\n".encode()
    one_by_one = [body[i:i + 1] for i in range(len(body))]
    expected = [Event("Åsa"), Event("1\n2", "x")]
    assert list(iter_sse_bytes(one_by_one)) == expected
    assert list(iter_sse_bytes([body])) == expected


def test_iter_sse_bytes_replaces_invalid_utf8():
    assert list(iter_sse_bytes([b"data: \xff\n\n"])) == [Event("\ufffd")]


def test_iter_sse_bytes_drops_unfinished_event():
    assert list(iter_sse_bytes([b"data: a\n\ndata: b\n"])) == [Event("a")]
