"""Notes analyzer — keyword frequency, sentiment and completion correlation.

Analysis only runs once a habit has enough non-empty notes (NOTES_MIN_ENTRIES
by default); below that the result says so explicitly instead of drawing
conclusions from a handful of entries.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable

from amaraday.config import NOTES_MIN_ENTRIES, KEYWORD_LIMIT
from amaraday.models import (
    DONE, LogEntry, NotesAnalysis, SentimentSummary, dedupe_logs,
)
from amaraday.sentiment import score_text

log = logging.getLogger(__name__)

STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "i", "me", "my", "you", "your",
    "this", "but", "had", "have", "were", "been", "am", "not",
    "so", "if", "or", "when", "where", "why", "how", "all", "can",
    "do", "does", "did", "just", "should", "could", "would",
    "she", "her", "him", "his", "they", "them", "their", "we", "our", "us",
    "what", "which", "who", "than", "then", "there", "these", "those",
    "into", "about", "after", "before", "over", "also", "very", "too",
    "some", "any", "out", "up", "off", "again", "only", "own", "same",
    "being", "having", "doing", "got", "get", "myself", "today",
})

_PUNCT_RE = re.compile(r"[^\w\s]")


def extract_keywords(notes: list[str], limit: int = KEYWORD_LIMIT) -> list[str]:
    """Top `limit` words by frequency; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for note in notes:
        words = _PUNCT_RE.sub("", note.lower()).split()
        counts.update(w for w in words if len(w) > 2 and w not in STOP_WORDS)
    return [word for word, _ in counts.most_common(limit)]


def summarize_sentiment(scores: list[int]) -> SentimentSummary:
    if not scores:
        return SentimentSummary()
    return SentimentSummary(
        positive=sum(1 for s in scores if s > 0),
        negative=sum(1 for s in scores if s < 0),
        neutral=sum(1 for s in scores if s == 0),
        average_score=sum(scores) / len(scores),
    )


# ═══════════════════════════════════════════════════════════════════════════
# Correlation text — ordered rules, first match wins
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _CorrelationContext:
    done_count: int
    done_positive: int
    done_negative: int
    summary: SentimentSummary
    keyword_text: str

    @property
    def done_positive_rate(self) -> float:
        return self.done_positive / self.done_count if self.done_count else 0.0


_Rule = tuple[Callable[[_CorrelationContext], bool], Callable[[_CorrelationContext], str]]

CORRELATION_RULES: list[_Rule] = [
    (
        lambda c: c.done_count == 0,
        lambda c: (
            "You haven't completed this habit recently. Your notes show "
            f"{'mostly positive' if c.summary.positive > c.summary.negative else 'mixed'}"
            f" feelings about it.{c.keyword_text}"
        ),
    ),
    (
        lambda c: c.done_positive_rate > 0.6,
        lambda c: (
            "When you complete this habit, you often mention feeling positive "
            f"and accomplished.{c.keyword_text} Keep up the great work!"
        ),
    ),
    (
        lambda c: c.done_positive_rate < 0.3 and c.done_negative > c.done_positive,
        lambda c: (
            "Your notes suggest completing this habit has been challenging."
            f"{c.keyword_text} Consider adjusting your approach or setting smaller goals."
        ),
    ),
    (
        lambda c: c.summary.average_score > 1,
        lambda c: (
            "Your notes show an overall positive attitude toward this habit."
            f"{c.keyword_text} This positive mindset is a great foundation for success."
        ),
    ),
    (
        lambda c: c.summary.average_score < -1,
        lambda c: (
            "Your notes indicate some frustration or difficulty with this habit."
            f"{c.keyword_text} Consider what obstacles might be in your way."
        ),
    ),
    (
        lambda c: True,
        lambda c: (
            f"You're tracking this habit consistently.{c.keyword_text} Your notes "
            "show a mix of experiences, which is perfectly normal for building new habits."
        ),
    ),
]


def generate_correlation_text(
    entries: list[tuple[LogEntry, int]],
    summary: SentimentSummary,
    keywords: list[str],
) -> str:
    """Relate completion status to note sentiment.

    `entries` pairs each note-bearing log with its sentiment score.
    """
    done_scores = [score for entry, score in entries if entry.status == DONE]
    ctx = _CorrelationContext(
        done_count=len(done_scores),
        done_positive=sum(1 for s in done_scores if s > 0),
        done_negative=sum(1 for s in done_scores if s < 0),
        summary=summary,
        keyword_text=(
            f" Common themes include: {', '.join(keywords[:3])}." if keywords else ""
        ),
    )
    for predicate, build in CORRELATION_RULES:
        if predicate(ctx):
            return build(ctx)
    return ""


def analyze_notes(logs: list[LogEntry], min_notes: int = NOTES_MIN_ENTRIES) -> NotesAnalysis:
    with_notes = [e for e in dedupe_logs(logs) if e.has_notes]

    if len(with_notes) < min_notes:
        return NotesAnalysis(has_enough_data=False, total_notes=len(with_notes))

    notes = [e.notes for e in with_notes]
    keywords = extract_keywords(notes)
    scores = [score_text(n) for n in notes]
    summary = summarize_sentiment(scores)
    correlation = generate_correlation_text(list(zip(with_notes, scores)), summary, keywords)

    log.debug(
        "Analyzed %d notes: avg=%.2f keywords=%s",
        len(notes), summary.average_score, keywords,
    )
    return NotesAnalysis(
        has_enough_data=True,
        total_notes=len(with_notes),
        keywords=keywords,
        sentiment_summary=summary,
        correlation_text=correlation,
    )
