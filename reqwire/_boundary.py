import logging
import random as _random
import string

__all__ = ["BoundaryGenerator", "BOUNDARY_LENGTH", "BOUNDARY_ALPHABET"]

logger = logging.getLogger(__name__)

# 30 characters drawn from 68 symbols is ~180 bits; nobody is going to
# produce a part body that happens to contain one of these by accident. We
# don't check for collisions against the content.
BOUNDARY_LENGTH = 30

# A subset of RFC 2046's bcharsnospace. Everything here is also legal
# unquoted, though we always quote the boundary parameter anyway.
BOUNDARY_ALPHABET = string.ascii_letters + string.digits + "+/_-:."


class BoundaryGenerator:
    """Draws multipart boundary tokens from an explicit random source.

    Pass a seeded :class:`random.Random` to get the same sequence of
    boundaries (and hence byte-identical payloads) on every run. If you
    don't pass one, this generator gets its own freshly seeded instance;
    there is no module-level random state.

    A generator, and the random source inside it, must not be shared
    between concurrent encodes.

    """

    def __init__(self, random=None, length=BOUNDARY_LENGTH,
                 alphabet=BOUNDARY_ALPHABET):
        if random is None:
            random = _random.Random()
        if not 1 <= length <= 70:
            raise ValueError(
                "boundary length must be in range [1, 70], not {}"
                .format(length))
        self._random = random
        self._length = length
        self._alphabet = alphabet

    def next_boundary(self):
        alphabet = self._alphabet
        token = "".join(
            alphabet[self._random.randrange(len(alphabet))]
            for _ in range(self._length))
        logger.debug("drew multipart boundary %s", token)
        return token
