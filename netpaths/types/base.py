"""Base aliases and enums shared by the path algorithms."""

from __future__ import annotations

from enum import IntEnum
from typing import Union

#: Additive routing metric (OSPF-style cost).
Cost = Union[int, float]

#: Link capacity (e.g. Mbps).
Capacity = Union[int, float]


class DiversityPolicy(IntEnum):
    """How alternative paths for a node pair are generated.

    ``LOOPLESS`` yields the next-cheapest loop-free paths (Yen). They may
    share links with earlier paths. ``LINK_DISJOINT`` removes every link of
    each accepted path before searching again, so paths never share a link,
    possibly at a higher cost.
    """

    LOOPLESS = 1
    LINK_DISJOINT = 2

    @classmethod
    def from_string(cls, value: str) -> "DiversityPolicy":
        """Parse a string into a DiversityPolicy value.

        Args:
            value: Case-insensitive name (e.g., "loopless", "LINK_DISJOINT").
                Dashes are accepted in place of underscores.

        Returns:
            The corresponding DiversityPolicy member.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.strip().upper().replace("-", "_")]
        except KeyError:
            valid = ", ".join(e.name.lower() for e in cls)
            raise ValueError(
                f"Invalid diversity policy '{value}'. Valid values are: {valid}"
            ) from None
