"""
Word Diff

Computes the word-level difference between two versions of a text.

Tokens
======
Text is split into runs of word characters, runs of whitespace, and single
punctuation characters. Every character lands in exactly one token, so
joining the tokens gives back the original text:

    "Hello, world"  ->  ["Hello", ",", " ", "world"]

Alignment
=========
The two token streams are aligned with difflib.SequenceMatcher (junk
heuristics off). Its opcodes become segments:

    equal    -> {"text": ...}
    delete   -> {"text": ..., "removed": True}
    insert   -> {"text": ..., "added": True}
    replace  -> removed segment, then added segment

Adjacent segments of the same kind are merged, so "the cat sat" ->
"the dog sat" yields:

    [{"text": "the "}, {"text": "cat", "removed": True},
     {"text": "dog", "added": True}, {"text": " sat"}]

Dropping the removed segments rebuilds the new text; dropping the added
segments rebuilds the old text.
"""

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any

TOKEN_PATTERN = re.compile(r"\w+|\s+|[^\w\s]")


@dataclass(frozen=True)
class Change:
    """One segment of a diff. Unchanged context has neither flag set."""

    text: str
    added: bool = False
    removed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out flags that are not set."""
        data: dict[str, Any] = {"text": self.text}
        if self.added:
            data["added"] = True
        if self.removed:
            data["removed"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Change":
        return cls(
            text=data["text"],
            added=bool(data.get("added")),
            removed=bool(data.get("removed")),
        )


def tokenize(text: str) -> list[str]:
    return TOKEN_PATTERN.findall(text)


def diff_words(old: str, new: str) -> list[Change]:
    """
    Diff two texts word by word.

    Returns:
        Segments covering every token of both inputs exactly once
    """
    old_tokens = tokenize(old)
    new_tokens = tokenize(new)
    matcher = SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)

    changes: list[Change] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append(changes, "".join(old_tokens[i1:i2]))
            continue
        if tag in ("delete", "replace"):
            _append(changes, "".join(old_tokens[i1:i2]), removed=True)
        if tag in ("insert", "replace"):
            _append(changes, "".join(new_tokens[j1:j2]), added=True)

    return changes


def _append(
    changes: list[Change],
    text: str,
    added: bool = False,
    removed: bool = False,
) -> None:
    """Append a segment, merging it into the previous one if they share a kind."""
    if not text:
        return

    if changes:
        last = changes[-1]
        if last.added == added and last.removed == removed:
            changes[-1] = Change(last.text + text, added=added, removed=removed)
            return

    changes.append(Change(text, added=added, removed=removed))


def apply_changes(changes: list[Change]) -> str:
    """Rebuild the new text from a diff."""
    return "".join(c.text for c in changes if not c.removed)


def revert_changes(changes: list[Change]) -> str:
    """Rebuild the old text from a diff."""
    return "".join(c.text for c in changes if not c.added)
