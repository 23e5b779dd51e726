import logging
from typing import Callable, Sequence, Tuple

logger = logging.getLogger(__name__)

_DASHES = "\u2010\u2011\u2012\u2013\u2014\u2015\u2212"
_SINGLE_QUOTES = "\u2018\u2019\u201A\u201B"
_DOUBLE_QUOTES = "\u201C\u201D\u201E\u201F"
_SPACES = (
    "\u00A0\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200A"
    "\u202F\u205F\u3000"
)

_PUNCTUATION_TABLE = str.maketrans(
    {
        **{c: "-" for c in _DASHES},
        **{c: "'" for c in _SINGLE_QUOTES},
        **{c: '"' for c in _DOUBLE_QUOTES},
        **{c: " " for c in _SPACES},
    }
)

LineComparator = Callable[[str, str], bool]


class ContentSearcher:
    """Locates a block of lines inside a file's lines.

    Matching runs through ``COMPARATORS`` in order, each pass scanning the
    whole candidate range before the next, looser one is tried.
    """

    @staticmethod
    def normalise(line: str) -> str:
        """Strip a line and map typographic punctuation and spaces to ASCII."""
        return line.strip().translate(_PUNCTUATION_TABLE)

    COMPARATORS: Tuple[Tuple[str, LineComparator], ...] = (
        ("exact", lambda a, b: a == b),
        ("rstrip", lambda a, b: a.rstrip() == b.rstrip()),
        ("strip", lambda a, b: a.strip() == b.strip()),
        ("unicode", lambda a, b: ContentSearcher.normalise(a) == ContentSearcher.normalise(b)),
    )

    @staticmethod
    def _matches_at(
        lines: Sequence[str],
        pattern: Sequence[str],
        offset: int,
        equal: LineComparator,
    ) -> bool:
        return all(
            equal(lines[offset + i], expected) for i, expected in enumerate(pattern)
        )

    @classmethod
    def find_sequence(
        cls,
        lines: Sequence[str],
        pattern: Sequence[str],
        start: int,
        eof: bool,
    ) -> int | None:
        """Returns the absolute index where ``pattern`` begins, or None.

        With ``eof`` set the only candidate is the tail of ``lines``; a
        miss there is final and does not fall back to scanning from
        ``start``.
        """
        if not pattern:
            return start

        if len(pattern) > len(lines):
            return None

        max_start = len(lines) - len(pattern)
        search_start = max_start if eof else start

        for name, equal in cls.COMPARATORS:
            for i in range(search_start, max_start + 1):
                if cls._matches_at(lines, pattern, i, equal):
                    if name != "exact":
                        logger.debug(
                            "Matched %d line(s) at %d using %s comparison",
                            len(pattern),
                            i,
                            name,
                        )
                    return i

        return None

