"""
this module defines the physical limits and allowances used when deciding whether fixes form a plausible flight path
"""

from datetime import timedelta

# fastest plausible ground speed of a pico balloon, in km/h
MAXIMUM_GROUND_SPEED = 300

# radius of the area a fix can be anywhere inside of, by locator length, in meters
UNCERTAINTY_RADIUS = {4: 100000, 6: 5000}

# a 4-character fix this close to a 6-character fix adds nothing to the path
REDUNDANCY_INTERVAL = timedelta(hours=2)
REDUNDANCY_DISTANCE = 200000

# segments shorter than this are accumulated before being counted, in meters
MINIMUM_SEGMENT_DISTANCE = 100000

# longitude deltas larger than this (in degrees) are taken as eastbound
AMBIGUOUS_LONGITUDE_DELTA = 120


def uncertainty_radius(locator: str) -> float:
    return UNCERTAINTY_RADIUS[6 if locator is not None and len(locator) >= 6 else 4]
