# We use native strings for all the re patterns, to take advantage of string
# formatting, and then compile them as str regexes: media types reach us as
# text, not as bytes off the wire.

# https://tools.ietf.org/html/rfc7230#section-3.2.3
#  OWS            = *( SP / HTAB )
#                 ; optional whitespace
OWS = r"[ \t]*"

# https://tools.ietf.org/html/rfc7230#section-3.2.6
#   token          = 1*tchar
#
#   tchar          = "!" / "#" / "$" / "%" / "&" / "'" / "*"
#                  / "+" / "-" / "." / "^" / "_" / "`" / "|" / "~"
#                  / DIGIT / ALPHA
#                  ; any VCHAR, except delimiters
token = r"[-!#$%&'*+.^_`|~0-9a-zA-Z]+"

#   quoted-string  = DQUOTE *( qdtext / quoted-pair ) DQUOTE
#   qdtext         = HTAB / SP /%x21 / %x23-5B / %x5D-7E / obs-text
#   quoted-pair    = "\" ( HTAB / SP / VCHAR / obs-text )
#
# obs-text is %x80-FF; since we are matching decoded text we let any
# non-ascii code point through there.
qdtext = r"[\t !#-\[\]-~\x80-\uffff]"
quoted_pair = r"\\[\t -~\x80-\uffff]"
quoted_string = r'"(?:{qdtext}|{quoted_pair})*"'.format(**globals())

# https://tools.ietf.org/html/rfc7231#section-3.1.1.1
#   media-type = type "/" subtype *( OWS ";" OWS parameter )
#   type       = token
#   subtype    = token
#   parameter  = token "=" ( token / quoted-string )
parameter = (
    r"(?P<name>{token})"
    r"="
    r"(?P<value>{token}|{quoted_string})"
    .format(**globals()))

media_type = (
    r"(?P<type>{token})"
    r"/"
    r"(?P<subtype>{token})"
    r"(?P<parameters>(?:{OWS};{OWS}{token}=(?:{token}|{quoted_string}))*)"
    r"{OWS}"
    .format(**globals()))

# Picks the parameters back out of the (already validated) tail of a
# media-type.
parameter_item = r"{OWS};{OWS}{parameter}".format(**globals())

# https://tools.ietf.org/html/rfc2046#section-5.1.1
#   boundary := 0*69<bchars> bcharsnospace
#   bchars := bcharsnospace / " "
#   bcharsnospace := DIGIT / ALPHA / "'" / "(" / ")" /
#                    "+" / "_" / "," / "-" / "." /
#                    "/" / ":" / "=" / "?"
bcharsnospace = r"[0-9a-zA-Z'()+_,\-./:=?]"
bchars = r"(?:{bcharsnospace}| )".format(**globals())
boundary = r"{bchars}{{0,69}}{bcharsnospace}".format(**globals())
