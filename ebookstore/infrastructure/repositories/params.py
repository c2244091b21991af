"""
Shared parsing of the positional find_by_params() arguments.
"""

from typing import Optional, Sequence, Tuple


def parse_find_params(params: Sequence[object]) -> Tuple[str, Optional[str]]:
    """
    Split positional params into (title, producer_id).

    Args:
        params: (title,) or (title, producer_id)

    Returns:
        The title and the producer id, None when only the title was given

    Raises:
        ValueError: If the params do not match a supported query shape
    """
    if not 1 <= len(params) <= 2:
        raise ValueError(
            f"find_by_params expects (title,) or (title, producer_id), got {len(params)} params"
        )

    for param in params:
        if not isinstance(param, str):
            raise ValueError(
                f"find_by_params expects string params, got {type(param).__name__}"
            )

    title = params[0]
    producer_id = params[1] if len(params) == 2 else None
    return title, producer_id
