import pytest

from .._content_type import ContentType
from .._util import InvalidContentType


def test_str():
    ct = ContentType("application", "multipart", charset="UTF-8",
                     boundary="---apa")
    assert str(ct) == 'application/multipart; charset=utf-8; boundary="---apa"'

    assert str(ContentType("text", "plain")) == "text/plain"
    assert (str(ContentType("text", "plain", params=[("format", "flowed")]))
            == "text/plain; format=flowed")
    # values that aren't tokens get quoted, with escapes
    assert (str(ContentType("text", "plain", params=[("title", 'a "b"')]))
            == 'text/plain; title="a \\"b\\""')


def test_normalization():
    ct = ContentType("Text", "HTML", charset="ISO-8859-1")
    assert ct.type == "text"
    assert ct.subtype == "html"
    assert ct.media_type == "text/html"
    # charset is kept as given, but compares and serializes lowercase
    assert ct.charset == "ISO-8859-1"
    assert ct == ContentType("text", "html", charset="iso-8859-1")
    assert hash(ct) == hash(ContentType("text", "html", charset="iso-8859-1"))
    assert ct != ContentType("text", "html")
    assert ct != "text/html; charset=iso-8859-1"


def test_immutable():
    ct = ContentType("text", "plain")
    with pytest.raises(AttributeError):
        ct.subtype = "html"


def test_invalid():
    for args in [
        ("text ", "plain"),
        ("", "plain"),
        ("text", "pl/ain"),
        ("te\"xt", "plain"),
    ]:
        with pytest.raises(InvalidContentType):
            ContentType(*args)

    with pytest.raises(InvalidContentType):
        ContentType("text", "plain", charset="utf 8")
    # boundaries: 1-70 bchars, and can't end with a space
    with pytest.raises(InvalidContentType):
        ContentType("multipart", "mixed", boundary="")
    with pytest.raises(InvalidContentType):
        ContentType("multipart", "mixed", boundary="x" * 71)
    with pytest.raises(InvalidContentType):
        ContentType("multipart", "mixed", boundary="abc ")
    with pytest.raises(InvalidContentType):
        ContentType("multipart", "mixed", boundary="a;b")
    ContentType("multipart", "mixed", boundary="x" * 70)
    ContentType("multipart", "mixed", boundary="a b'()+_,-./:=?")

    # no header injection through parameter values
    with pytest.raises(InvalidContentType):
        ContentType("text", "plain", params=[("x", "a\r\nEvil: 1")])
    # charset and boundary have their own arguments
    with pytest.raises(InvalidContentType):
        ContentType("text", "plain", params=[("Charset", "utf-8")])


def test_parse():
    assert ContentType.parse("text/plain") == ContentType("text", "plain")
    assert (ContentType.parse("Multipart/Form-Data; BOUNDARY=\"a:b/c\"")
            == ContentType("multipart", "form-data", boundary="a:b/c"))
    assert (ContentType.parse("text/html;charset=UTF-8")
            == ContentType("text", "html", charset="utf-8"))
    assert (ContentType.parse("  text/html ;  charset=utf-8 ; level=1  ")
            == ContentType("text", "html", charset="utf-8",
                           params=[("level", "1")]))
    ct = ContentType.parse('application/x-thing; Title="say \\"hi\\""')
    assert ct.params == (("title", 'say "hi"'),)

    # round trip
    ct = ContentType("multipart", "form-data", charset="utf-8",
                     boundary="nLWsTCFurKCiU+PjC/cCmmU-tnJHHa")
    assert ContentType.parse(str(ct)) == ct


def test_parse_invalid():
    for text in [
        "",
        "text",
        "text/",
        "/plain",
        "text/plain;",
        "text/plain; charset",
        "text/plain; charset=",
        'text/plain; title="unterminated',
        "text/plain; a=b c",
        "text/plain\r\nEvil: yes",
        "text/plain; charset=utf-8; charset=latin-1",
        'multipart/mixed; boundary="a"; boundary="b"',
        'multipart/mixed; boundary="has;semicolon"',
    ]:
        with pytest.raises(InvalidContentType):
            ContentType.parse(text)


def test_coerce():
    ct = ContentType("image", "gif")
    assert ContentType.coerce(ct) is ct
    assert ContentType.coerce("image/gif") == ct
    with pytest.raises(InvalidContentType):
        ContentType.coerce("image")
    with pytest.raises(TypeError):
        ContentType.coerce(b"image/gif")
