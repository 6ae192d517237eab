"""
Ticket number expressions and contiguous-run batching.

Staff enter ticket numbers the way they are torn off a book, e.g.
``"101-110, 115, 117-118"``. Writes are issued one range per contiguous
run instead of one per ticket.
"""

import re
from typing import Iterable, List, Tuple

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def parse_ticket_numbers(expression: str, max_count: int) -> List[int]:
    """
    Parse a comma separated list of numbers and inclusive ranges.

    Returns the sorted, de-duplicated ticket numbers.

    Raises:
        ValueError: malformed token, reversed range, or more than
            ``max_count`` numbers
    """
    numbers = set()
    for raw in (expression or "").split(","):
        token = raw.strip()
        if not token:
            continue
        match = _RANGE_RE.match(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            if end < start:
                raise ValueError(f"Reversed range: {token}")
            if end - start + 1 > max_count:
                raise ValueError(f"Range too large: {token}")
            numbers.update(range(start, end + 1))
        elif token.isdigit():
            numbers.add(int(token))
        else:
            raise ValueError(f"Invalid ticket number: {token}")

        if len(numbers) > max_count:
            raise ValueError(f"At most {max_count} tickets per request")

    if not numbers:
        raise ValueError("No ticket numbers given")
    return sorted(numbers)


def contiguous_runs(numbers: Iterable[int]) -> List[Tuple[int, int]]:
    """Greedily group numbers into inclusive (start, end) runs of consecutive values."""
    runs: List[Tuple[int, int]] = []
    for number in sorted(set(numbers)):
        if runs and number == runs[-1][1] + 1:
            runs[-1] = (runs[-1][0], number)
        else:
            runs.append((number, number))
    return runs
