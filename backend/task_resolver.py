from typing import Callable, Iterable

from models import Confidence, MatchResult, Task

# Fuzzy tier ignores short filler words like "a", "to", "my"
MIN_FUZZY_TOKEN_LENGTH = 3


def _exact(query: str, text: str) -> bool:
    return text == query


def _prefix(query: str, text: str) -> bool:
    return text.startswith(query)


def _all_words(query: str, text: str) -> bool:
    return all(word in text for word in query.split())


def _substring(query: str, text: str) -> bool:
    return query in text


# Tried in order; a tier is only consulted when every earlier tier came up empty
MATCH_TIERS: list[tuple[Callable[[str, str], bool], Confidence]] = [
    (_exact, "exact"),
    (_prefix, "high"),
    (_all_words, "high"),
    (_substring, "medium"),
]


def _single_or_ambiguous(matches: list[Task], confidence: Confidence) -> MatchResult:
    if len(matches) == 1:
        return MatchResult(task=matches[0], confidence=confidence, matches=matches)
    return MatchResult(task=None, confidence="ambiguous", matches=matches)


def resolve_task(name: str, tasks: Iterable[Task]) -> MatchResult:
    """
    Resolve a free-text reference to one of the open tasks.

    Completed tasks are never candidates. Matching is case-insensitive and
    keeps the store's ordering. When more than one task satisfies a tier the
    result is "ambiguous" and carries every candidate; nothing is picked
    on the caller's behalf.
    """
    query = " ".join(name.lower().split())
    candidates = [task for task in tasks if not task.completed]
    if not query or not candidates:
        return MatchResult()

    lowered = [(task, " ".join(task.text.lower().split())) for task in candidates]

    for matches_tier, confidence in MATCH_TIERS:
        matches = [task for task, text in lowered if matches_tier(query, text)]
        if matches:
            # Exact text equality is unambiguous even with duplicates
            if confidence == "exact":
                return MatchResult(task=matches[0], confidence="exact", matches=matches)
            return _single_or_ambiguous(matches, confidence)

    tokens = [word for word in query.split() if len(word) >= MIN_FUZZY_TOKEN_LENGTH]
    if not tokens:
        return MatchResult()
    matches = [task for task, text in lowered if any(token in text for token in tokens)]
    if not matches:
        return MatchResult()
    return _single_or_ambiguous(matches, "low")
