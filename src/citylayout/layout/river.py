"""River band and bridges derived from the placed buildings."""

import math
import logging
from typing import Iterable, Optional, Tuple

from ..core.config import LayoutConfig
from ..core.contracts import Bridge, Building, River

logger = logging.getLogger(__name__)


def place_river(buildings: Iterable[Building], config: Optional[LayoutConfig] = None) -> River:
    """
    River parallel to the X axis through the channel opened by the packer.

    The X-span covers every building plus a margin on each side; with no
    buildings only the margin remains.
    """
    config = config or LayoutConfig()
    xs = [b.position[0] for b in buildings]
    min_x = min(xs) if xs else 0.0
    max_x = max(xs) if xs else 0.0
    margin = config.river.margin

    return River(
        min_x=min_x - margin,
        max_x=max_x + margin,
        center_z=config.river_center_z,
        width=config.river.width,
    )


def place_bridges(river: River, config: Optional[LayoutConfig] = None) -> Tuple[Bridge, ...]:
    """Bridges evenly spaced along the river, turned across it."""
    config = config or LayoutConfig()
    count = config.river.bridge_count
    width = river.width + config.river.bridge_extra_width

    return tuple(
        Bridge(
            position=(river.min_x + river.length * (i + 1) / (count + 1), 0.0, river.center_z),
            width=width,
            rotation=math.pi / 2,
        )
        for i in range(count)
    )
