import csv
import logging
import math
from pathlib import Path
from typing import List

from radarmerge.geo.geometry import Point
from radarmerge.models.radar import RadarParams

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['id', 'name', 'x', 'y', 'range', 'height']


def parse_csv_radars(csv_path: Path) -> List[RadarParams]:
    """
    Parse a CSV file containing radar definitions.
    Expected columns: ID, Name, X, Y, Range, Height, [Azimuth_Start, Azimuth_End]
    Headers are case-insensitive; azimuths are in radians.
    """
    radars = []
    csv_path = Path(csv_path)
    if not csv_path.exists():
        return []

    with open(csv_path, 'r', encoding='utf-8-sig') as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            return []

        # Map normalized headers to actual headers
        header_map = {h.strip().lower(): h for h in reader.fieldnames}
        if 'range_m' in header_map and 'range' not in header_map:
            header_map['range'] = header_map['range_m']
        if 'height_m' in header_map and 'height' not in header_map:
            header_map['height'] = header_map['height_m']

        if not all(r in header_map for r in REQUIRED_COLUMNS):
            log.warning(f"CSV {csv_path.name} missing required columns (ID, Name, X, Y, Range, Height)")
            return []

        for line_no, row in enumerate(reader, start=2):
            try:
                az_start = 0.0
                az_end = 2 * math.pi
                if 'azimuth_start' in header_map and row[header_map['azimuth_start']]:
                    az_start = float(row[header_map['azimuth_start']])
                if 'azimuth_end' in header_map and row[header_map['azimuth_end']]:
                    az_end = float(row[header_map['azimuth_end']])

                radars.append(RadarParams(
                    id=int(row[header_map['id']]),
                    name=row[header_map['name']].strip(),
                    position=Point(float(row[header_map['x']]), float(row[header_map['y']])),
                    range_m=float(row[header_map['range']]),
                    height_m=float(row[header_map['height']]),
                    azimuth_start=az_start,
                    azimuth_end=az_end,
                ))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                log.warning(f"Skipping invalid row {line_no} in {csv_path.name}: {e}")
                continue

    return radars


__all__ = ["parse_csv_radars"]
