"""Recover structured JSON payloads from free-form model output.

Generation services are asked for pure JSON but regularly wrap the payload in
prose, markdown fences, or emit several candidate blocks. The extractor tries,
in order:

1. a direct parse of the whole text;
2. every delimiter-bounded candidate (``{...}`` then ``[...]``), ranked so the
   longest, latest object wins;
3. a last-chance slice from the first ``{`` to the last ``}`` after removing
   fence markers.

Failure is a value (``None``), never an exception: callers decide which
defaults to substitute.
"""

from __future__ import annotations

import json
import logging
import re
from bisect import bisect_right
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Literal


logger = logging.getLogger(__name__)

CandidateKind = Literal["object", "array"]

_DELIMITERS: tuple[tuple[CandidateKind, str, str], ...] = (
    ("object", "{", "}"),
    ("array", "[", "]"),
)

_LEADING_FENCE = re.compile(r"^```[\w+-]*")
_TRAILING_FENCE = re.compile(r"```$")
_ANY_FENCE = re.compile(r"```[\w+-]*")

DEFAULT_MAX_INPUT_CHARS = 200_000
DEFAULT_MAX_CANDIDATES = 50_000


@dataclass(frozen=True, slots=True)
class Candidate:
    """A delimiter-bounded slice of the source text (``end`` is exclusive)."""

    start: int
    end: int
    kind: CandidateKind

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("Candidate end offset must exceed its start offset")

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def candidate_sort_key(candidate: Candidate) -> tuple[int, int, int]:
    """Objects first, then longer first, then later in the text first."""
    return (
        0 if candidate.kind == "object" else 1,
        -candidate.length,
        -candidate.start,
    )


def strip_fence(snippet: str) -> str:
    """Remove one leading and one trailing markdown fence marker, if present."""
    cleaned = snippet.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _positions(text: str, char: str) -> list[int]:
    return [i for i, c in enumerate(text) if c == char]


def _pair_count(opens: list[int], closes: list[int]) -> int:
    """Number of (open, close) pairs with close after open."""
    return sum(len(closes) - bisect_right(closes, pos) for pos in opens)


def enumerate_candidates(text: str) -> Iterator[Candidate]:
    """Yield every opener paired with every later closer.

    For each opening position the closers are visited from the rightmost one
    backward, so the first candidates produced per opener are the longest.
    """
    for kind, opener, closer in _DELIMITERS:
        closes = _positions(text, closer)
        for start in _positions(text, opener):
            for end in reversed(closes):
                if end <= start:
                    break
                yield Candidate(start=start, end=end + 1, kind=kind)


def scan_balanced_candidates(text: str) -> Iterator[Candidate]:
    """Linear bracket matching that skips delimiters inside JSON strings.

    Yields one candidate per matched pair at every nesting level. Used in
    place of the combinatorial enumeration for oversized inputs.
    """
    closer_for = {opener: (kind, closer) for kind, opener, closer in _DELIMITERS}
    stack: list[tuple[int, str]] = []
    in_string = False
    escaped = False
    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in closer_for:
            stack.append((index, char))
        elif char in ("}", "]"):
            # Unwind to the nearest matching opener; mismatched openers are noise.
            for depth in range(len(stack) - 1, -1, -1):
                start, opener = stack[depth]
                kind, closer = closer_for[opener]
                if closer == char:
                    del stack[depth:]
                    yield Candidate(start=start, end=index + 1, kind=kind)
                    break


def _try_parse(snippet: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(snippet)
    except ValueError:
        return False, None


class StructuredOutputExtractor:
    """Best-effort JSON recovery for generation-service output."""

    def __init__(
        self,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
    ) -> None:
        self.max_input_chars = max_input_chars
        self.max_candidates = max_candidates

    def candidates(self, text: str) -> list[Candidate]:
        """Return candidates in the order they will be tried."""
        if len(text) > self.max_input_chars or self._too_many_pairs(text):
            logger.debug(
                "Using linear bracket scan for %d chars of model output", len(text)
            )
            found = list(scan_balanced_candidates(text))
        else:
            found = list(enumerate_candidates(text))
        found.sort(key=candidate_sort_key)
        return found

    def _too_many_pairs(self, text: str) -> bool:
        total = 0
        for _, opener, closer in _DELIMITERS:
            total += _pair_count(_positions(text, opener), _positions(text, closer))
            if total > self.max_candidates:
                return True
        return False

    def extract(self, text: object) -> Any | None:
        """Return the recovered value, or ``None`` when nothing parses."""
        if not isinstance(text, str) or not text:
            return None

        ok, value = _try_parse(text)
        if ok:
            return value

        for candidate in self.candidates(text):
            ok, value = _try_parse(strip_fence(candidate.slice(text)))
            if ok:
                return value

        cleaned = _ANY_FENCE.sub("", text).strip()
        first = cleaned.find("{")
        last = cleaned.rfind("}")
        if first != -1 and last > first:
            ok, value = _try_parse(cleaned[first : last + 1])
            if ok:
                return value

        logger.debug("No structured payload recovered from %d chars", len(text))
        return None


_default_extractor = StructuredOutputExtractor()


def extract_json(text: object) -> Any | None:
    """Module-level convenience wrapper around the default extractor."""
    return _default_extractor.extract(text)
