from typing import Iterable


def trending_sort_key(
    server_id: str,
    score: float,
    rating_count: int,
) -> tuple[float, int, str]:
    """Score descending, then rating count descending, then server id ascending."""
    return (-score, -rating_count, server_id)


def rank_trending(
    entries: Iterable[tuple[str, float, int]],
) -> list[tuple[str, float, int]]:
    """Sort (server_id, score, rating_count) entries into trending order."""
    return sorted(
        entries,
        key=lambda entry: trending_sort_key(*entry),
    )
