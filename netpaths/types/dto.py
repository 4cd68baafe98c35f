"""Small immutable records shared between the graph and path layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# 'fwd' traverses a Link source->target, 'rev' traverses target->source
EdgeDir = Literal["fwd", "rev"]


@dataclass(frozen=True, order=True)
class EdgeRef:
    """Reference to one directed arc of a link.

    Both arcs of a link share ``link_id``, which is what identifies the
    physical link when checking whether two paths overlap.

    Attributes:
        link_id: Topology link identifier.
        direction: 'fwd' for source->target as defined in the Link; 'rev' otherwise.
    """

    link_id: str
    direction: EdgeDir

    @property
    def reverse(self) -> "EdgeRef":
        """The arc traversing the same link in the opposite direction."""
        return EdgeRef(self.link_id, "rev" if self.direction == "fwd" else "fwd")
