"""Fuzzy matching used by `find` and the picker."""
from typing import List, Optional, Sequence, Tuple

BOUNDARY_CHARS = "/_-. "

# A contiguous run must outscore the same characters matched apart at word boundaries
RUN_BONUS = 40
RUN_STEP = 8
MAX_RUN_EXTRA = 24
BOUNDARY_BONUS = 35


def fuzzy_score(query: str, candidate: str) -> Optional[int]:
    """Score ``candidate`` against ``query`` as a case-insensitive subsequence.

    Returns None when the query characters do not all appear in order.
    Consecutive runs and matches at word boundaries score higher; long
    candidates are penalised slightly.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += RUN_BONUS + min(MAX_RUN_EXTRA, run * RUN_STEP)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in BOUNDARY_CHARS:
            score += BOUNDARY_BONUS
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def fuzzy_rank(query: str, candidates: Sequence[str]) -> List[Tuple[int, str]]:
    """Return ``(index, candidate)`` pairs that match, best first.

    Ties keep the original order of ``candidates``.
    """
    scored = []
    for idx, candidate in enumerate(candidates):
        score = fuzzy_score(query, candidate)
        if score is not None:
            scored.append((score, idx, candidate))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [(idx, candidate) for _, idx, candidate in scored]
