"""Map a recommended choice label onto its position in the choice list."""

from __future__ import annotations

from typing import Optional, Sequence

from interactive_choice.dialog.errors import RecommendationError
from interactive_choice.dialog.types import NO_RECOMMENDATION


def resolve_recommended_index(choices: Sequence[str], recommended: Optional[str]) -> int:
    """Return the index of ``recommended`` within ``choices``.

    Both sides are compared after stripping surrounding whitespace; case is
    significant and the first matching position wins. ``None`` means no
    recommendation and yields ``-1``.
    """

    if recommended is None:
        return NO_RECOMMENDATION

    target = recommended.strip()
    for index, candidate in enumerate(choices):
        if candidate.strip() == target:
            return index

    raise RecommendationError(
        'recommended choice "{0}" does not match any available choices. Available: {1}'.format(
            recommended,
            ", ".join(choices),
        )
    )
