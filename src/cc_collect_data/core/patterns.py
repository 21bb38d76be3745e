"""Problem vocabulary used to flag noteworthy log lines."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

# Historical reports were produced with this exact list; keep it stable.
# \b marks a word boundary, ".*" gaps let phrases span other words.
PROBLEM_VOCABULARY: tuple[str, ...] = (
    r"\babort",
    r"\bbad\b",
    r"\bbug\b",
    r"\bcannot\b",
    r"\bcatastrophic",
    r"\bcould not\b",
    r"\bcouldn't\b",
    r"\bcritical",
    r"\bdie\b",
    r"\bdied\b",
    r"\bdoes.*not.*exist\b",
    r"\bdying\b",
    r"\bempty\b",
    r"\berroneous",
    r"\berror",
    r"\bexpected\b",
    r"\bfail",
    r"\bfatal",
    r"\bimpossible\b",
    r"\bimpossibly\b",
    r"\bincorrect",
    r"\binvalid\b",
    r'\blevel="*error"* ',
    r'\blevel="*fatal"* ',
    r'\blevel="*panic"* ',
    r'\blevel="*warning"* ',
    r"\bmissing\b",
    r"\bneed\b",
    r"\bno.*such.*file\b",
    r"\bnot.*found\b",
    r"\bnot.*supported\b",
    r"\btoo many\b",
    r"\bunable\b",
    r"\bunavailable\b",
    r"\bunexpected",
    r"\bunknown\b",
    r"\burgent",
    r"\bwarn\b",
    r"\bwarning\b",
    r"\bwrong\b",
)


@dataclass(frozen=True, slots=True)
class ProblemPattern:
    """Case-insensitive OR over a fixed list of regular expressions."""

    entries: tuple[str, ...] = PROBLEM_VOCABULARY
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError("ProblemPattern needs at least one entry")
        combined = "|".join(f"(?:{entry})" for entry in self.entries)
        object.__setattr__(self, "_regex", re.compile(combined, re.IGNORECASE))

    def matches(self, line: str) -> bool:
        """Return True if any vocabulary entry occurs in the line."""
        return self._regex.search(line) is not None

    def filter(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield the matching lines, preserving order."""
        for line in lines:
            if self.matches(line):
                yield line


DEFAULT_PROBLEM_PATTERN = ProblemPattern()
