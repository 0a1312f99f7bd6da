"""
Activity merge suggestions.

Titles are clustered greedily around a seed: each unassigned title starts a
group and pulls in every later unassigned title similar enough to it. A title
that resembles another member but not the seed stays out of the group.
"""

import re
from itertools import combinations

from core.config import DEFAULT_SIMILARITY_THRESHOLD
from models.events import CalendarEvent, rename_event
from models.stats import MergeSuggestion

_WHITESPACE = re.compile(r"\s+")
# Word characters are ASCII only; accented letters are stripped like punctuation
_NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")


def normalize_name(name: str) -> str:
    """Lowercase, trim, collapse whitespace and strip punctuation."""
    collapsed = _WHITESPACE.sub(" ", name.lower().strip())
    return _NON_WORD.sub("", collapsed)


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j], current[j - 1], previous[j - 1]))
        previous = current
    return previous[-1]


def calculate_similarity(name1: str, name2: str) -> float:
    """Similarity score between two activity names, 0 to 1."""
    norm1 = normalize_name(name1)
    norm2 = normalize_name(name2)

    if norm1 == norm2:
        return 1.0

    if norm1 in norm2 or norm2 in norm1:
        shorter, longer = sorted((len(norm1), len(norm2)))
        return shorter / longer

    return 1 - levenshtein_distance(norm1, norm2) / max(len(norm1), len(norm2))


def _longest(titles: list[str]) -> str:
    # max() keeps the earliest title among equal lengths
    return max(titles, key=lambda t: len(normalize_name(t)))


def suggest_canonical_name(titles: list[str]) -> str:
    """
    Pick the display name for a merged group.

    Prefers titles starting with a capital A-Z, then the longest one
    once punctuation and spacing are ignored.
    """
    if not titles:
        return ""
    capitalized = [t for t in titles if "A" <= t[:1] <= "Z"]
    return _longest(capitalized or titles)


def _unique_titles(events: list[CalendarEvent]) -> list[str]:
    return list(dict.fromkeys(event.title for event in events))


def generate_merge_suggestions(
    events: list[CalendarEvent], similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
) -> list[MergeSuggestion]:
    """
    Suggest groups of similarly named activities to merge.

    Confidence is the mean similarity over every pair in the group.
    Cost grows quadratically with the number of distinct titles.
    """
    titles = _unique_titles(events)
    assigned: set[str] = set()
    suggestions = []

    for i, seed in enumerate(titles):
        if seed in assigned:
            continue
        group = [seed]
        assigned.add(seed)

        for candidate in titles[i + 1 :]:
            if candidate in assigned:
                continue
            if calculate_similarity(seed, candidate) >= similarity_threshold:
                group.append(candidate)
                assigned.add(candidate)

        if len(group) < 2:
            continue

        members = set(group)
        group_events = [event for event in events if event.title in members]
        pair_scores = [calculate_similarity(a, b) for a, b in combinations(group, 2)]

        suggestions.append(
            MergeSuggestion(
                activities=group,
                suggested_name=suggest_canonical_name(group),
                confidence=sum(pair_scores) / len(pair_scores),
                event_count=len(group_events),
                total_minutes=sum(event.duration_minutes for event in group_events),
            )
        )

    suggestions.sort(key=lambda s: s.confidence, reverse=True)
    return suggestions


# =============================================================================
# APPLYING DECISIONS
# =============================================================================


def apply_title_mappings(
    events: list[CalendarEvent], mappings: dict[str, str]
) -> list[CalendarEvent]:
    """Rename events whose title has a mapping; others are returned as-is."""
    if not mappings:
        return list(events)
    return [
        rename_event(event, mappings[event.title]) if event.title in mappings else event
        for event in events
    ]


def title_mappings_for(suggestion: MergeSuggestion, name: str | None = None) -> dict[str, str]:
    """Mappings that merge every activity in suggestion into one name."""
    target = name or suggestion.suggested_name
    return {activity: target for activity in suggestion.activities if activity != target}


def remove_events(events: list[CalendarEvent], removed_ids: set[str]) -> list[CalendarEvent]:
    if not removed_ids:
        return list(events)
    return [event for event in events if event.id not in removed_ids]
