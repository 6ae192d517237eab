from typing import Optional

# Characters after which a match counts as the start of a word
_WORD_BREAKS = " @._-+()"


def fuzzy_score(query: str, candidate: Optional[str]) -> Optional[float]:
    """
    Score how well ``query`` matches ``candidate`` (higher is better).

    Exact match scores 100, substring matches 60-80 (earlier is better),
    and an in-order subsequence match at most 60. Returns None when the
    query characters do not all appear in order.
    """
    q = (query or "").strip().lower()
    c = (candidate or "").strip().lower()
    if not q or not c:
        return None

    if q == c:
        return 100.0

    position = c.find(q)
    if position >= 0:
        return 80.0 - min(position, 20)

    # Single pass: walk the candidate once, consuming query chars in order
    points = 0
    matched = 0
    previous = -2
    for index, char in enumerate(c):
        if matched == len(q):
            break
        if char != q[matched]:
            continue
        points += 3 if index == previous + 1 else 1
        if index == 0 or c[index - 1] in _WORD_BREAKS:
            points += 2
        previous = index
        matched += 1

    if matched < len(q):
        return None
    return round(60.0 * points / (5 * len(q)), 2)
