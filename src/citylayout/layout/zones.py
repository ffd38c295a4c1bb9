"""District zone aggregation over the final building positions."""

import logging
from typing import Sequence, Tuple

import pandas as pd

from ..core.contracts import Building, DistrictZone, ZoneBounds
from ..districts import District, district_display

logger = logging.getLogger(__name__)


def aggregate_district_zones(buildings: Sequence[Building]) -> Tuple[DistrictZone, ...]:
    """
    Bounding box, centroid and population per district.

    Zones come out in order of each district's first building.
    """
    if not buildings:
        return ()

    frame = pd.DataFrame({
        'district': [b.district for b in buildings],
        'x': [b.position[0] for b in buildings],
        'z': [b.position[2] for b in buildings],
    })
    stats = frame.groupby('district', sort=False).agg(
        min_x=('x', 'min'),
        max_x=('x', 'max'),
        min_z=('z', 'min'),
        max_z=('z', 'max'),
        mean_x=('x', 'mean'),
        mean_z=('z', 'mean'),
        population=('x', 'size'),
    )

    zones = []
    for district_id, row in stats.iterrows():
        name, color = district_display(district_id)
        if District.from_id(district_id) is None:
            logger.warning(f"Unknown district id '{district_id}' - using fallback label")
        zones.append(DistrictZone(
            id=district_id,
            name=name,
            color=color,
            bounds=ZoneBounds(
                min_x=float(row['min_x']),
                max_x=float(row['max_x']),
                min_z=float(row['min_z']),
                max_z=float(row['max_z']),
            ),
            center=(float(row['mean_x']), 0.0, float(row['mean_z'])),
            population=int(row['population']),
        ))
    return tuple(zones)
