"""Word-based input budgeting for prompts.

Counts are whitespace-delimited words, not model tokens. The limits leave
headroom below the model's context window, using a rough 1.5 tokens per
word estimate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

MAX_INPUT_TOKENS = 40000
MAX_INPUT_WORDS = 27000
TOKENS_PER_WORD = 1.5
TRUNCATION_MARKER = "\n\n[... truncated to stay within token limit ...]"


@dataclass(frozen=True)
class PromptSection:
    """A labelled piece of prompt input.

    ``weight`` is the section's share of the budget left after fixed
    sections are reserved. Sections with ``weight=None`` are fixed: they are
    reserved first and only cut when they alone would not fit.
    ``word_count`` counts kept original words, not the truncation marker.
    """

    label: str
    text: str
    word_count: int
    weight: Optional[float] = None
    truncated: bool = False

    @classmethod
    def from_text(cls, label: str, text: str, weight: Optional[float] = None) -> "PromptSection":
        return cls(label=label, text=text, word_count=count_words(text), weight=weight)


@dataclass(frozen=True)
class BudgetResult:
    """Sections after budgeting, in the order they were given."""

    sections: tuple[PromptSection, ...]
    total_words: int
    original_words: int

    @property
    def truncated(self) -> bool:
        return any(section.truncated for section in self.sections)

    def __getitem__(self, label: str) -> PromptSection:
        for section in self.sections:
            if section.label == label:
                return section
        raise KeyError(label)


def count_words(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


def estimate_tokens(text: str) -> int:
    """Rough token estimate for ``text``."""
    return int(count_words(text) * TOKENS_PER_WORD)


def truncate_to_word_limit(text: str, max_words: int) -> tuple[str, int]:
    """Keep at most ``max_words`` leading words of ``text``.

    Args:
        text: Input text.
        max_words: Maximum number of words to keep.

    Returns:
        Tuple of (text, words kept). Text within the limit is returned
        unchanged; otherwise the kept words are joined by single spaces and
        the truncation marker is appended.
    """
    words = text.split()
    if not words or len(words) <= max_words:
        return text, len(words)

    keep = max(max_words, 0)
    return " ".join(words[:keep]) + TRUNCATION_MARKER, keep


def truncate_content(text: str, max_words: int = MAX_INPUT_WORDS) -> tuple[str, int, bool]:
    """Truncate a single block of input to the word budget.

    Returns:
        Tuple of (text, words kept, was_truncated).
    """
    original = count_words(text)
    truncated, kept = truncate_to_word_limit(text, max_words)
    if kept < original:
        logger.debug(f"Truncated input from {original} to {kept} words")
    return truncated, kept, kept < original


def _cut(section: PromptSection, max_words: int) -> PromptSection:
    if section.word_count <= max_words:
        return section
    text, kept = truncate_to_word_limit(section.text, max_words)
    return replace(section, text=text, word_count=kept, truncated=True)


def _shares(sections: Sequence[PromptSection], budget: int) -> list[int]:
    """Split ``budget`` by weight. The last section takes the rounding remainder."""
    total_weight = sum(section.weight or 0.0 for section in sections)
    shares = []
    remaining = budget
    for index, section in enumerate(sections):
        if index == len(sections) - 1:
            shares.append(remaining)
            break
        share = int(budget * (section.weight or 0.0) / total_weight) if total_weight else 0
        shares.append(share)
        remaining -= share
    return shares


def split_budget(
    sections: Sequence[PromptSection], total_budget: int = MAX_INPUT_WORDS
) -> BudgetResult:
    """Fit several prompt sections into one word budget.

    When everything fits, sections come back untouched. Otherwise fixed
    sections are reserved first (a fixed section that does not fit is cut
    to a quarter of what is left), then weighted sections share the rest.
    A weighted section smaller than its share keeps all of its text and
    hands the unused words to the others; the remaining ones are cut to
    their share.

    Args:
        sections: Sections in output order.
        total_budget: Word budget across all sections.

    Returns:
        BudgetResult whose kept word counts never sum above ``total_budget``.
    """
    original = sum(section.word_count for section in sections)
    if original <= total_budget:
        return BudgetResult(tuple(sections), original, original)

    result: dict[int, PromptSection] = {}
    remaining = max(total_budget, 0)

    for index, section in enumerate(sections):
        if section.weight is not None:
            continue
        if section.word_count < remaining:
            result[index] = section
            remaining -= section.word_count
        else:
            cut = _cut(section, remaining // 4)
            result[index] = cut
            remaining -= cut.word_count

    pending = [index for index, section in enumerate(sections) if section.weight is not None]
    while pending:
        shares = _shares([sections[index] for index in pending], remaining)
        fitting = [
            index for index, share in zip(pending, shares) if sections[index].word_count <= share
        ]
        if not fitting:
            for index, share in zip(pending, shares):
                result[index] = _cut(sections[index], share)
            break
        for index in fitting:
            result[index] = sections[index]
            remaining -= sections[index].word_count
            pending.remove(index)

    budgeted = tuple(result[index] for index in range(len(sections)))
    total = sum(section.word_count for section in budgeted)
    logger.debug(f"Budgeted prompt input from {original} to {total} words")
    return BudgetResult(budgeted, total, original)
