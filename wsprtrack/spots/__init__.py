from wsprtrack.spots.base import Distance, maidenhead_to_coordinates, Spot
from wsprtrack.spots.decoding import decode_spot, decode_spots
from wsprtrack.spots.matching import coreceived, match_reports, MatchState
from wsprtrack.spots.tracks import SpotTrack, TrackSummary

__all__ = [
    'Distance',
    'maidenhead_to_coordinates',
    'Spot',
    'decode_spot',
    'decode_spots',
    'coreceived',
    'match_reports',
    'MatchState',
    'SpotTrack',
    'TrackSummary',
]
