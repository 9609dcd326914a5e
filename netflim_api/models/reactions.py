"""Three-state reaction of a visitor to a movie.

Storage keeps a boolean `is_liked` on an existing edge and encodes the
neutral state as the absence of the edge; this enum is the boundary type.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Reaction(str, Enum):
    neutral = "neutral"
    liked = "liked"
    disliked = "disliked"

    @classmethod
    def from_storage(cls, is_liked: Optional[bool]) -> "Reaction":
        if is_liked is None:
            return cls.neutral
        return cls.liked if is_liked else cls.disliked

    @property
    def is_liked(self) -> Optional[bool]:
        """Storage value: True/False for an edge, None for no edge."""
        if self is Reaction.neutral:
            return None
        return self is Reaction.liked

    def next(self) -> "Reaction":
        """neutral -> liked -> disliked -> neutral."""
        return _CYCLE[self]


_CYCLE = {
    Reaction.neutral: Reaction.liked,
    Reaction.liked: Reaction.disliked,
    Reaction.disliked: Reaction.neutral,
}
