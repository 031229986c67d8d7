"""
WSPR band plan as used by telemetry channels

For each band, the starting minute of channel 0, the band identifier used by wspr.live, and the lowest frequency
of the WSPR window (in Hz).
"""

from typing import NamedTuple


class BandInfo(NamedTuple):
    start_minute: int
    wspr_live_band: int
    start_frequency: int


BANDS = {
    '2200m': BandInfo(0, -1, 137400),
    '630m': BandInfo(4, 0, 475600),
    '160m': BandInfo(8, 1, 1838000),
    '80m': BandInfo(2, 3, 3570000),
    '60m': BandInfo(6, 5, 5288600),
    '40m': BandInfo(0, 7, 7040000),
    '30m': BandInfo(4, 10, 10140100),
    '20m': BandInfo(8, 14, 14097000),
    '17m': BandInfo(2, 18, 18106000),
    '15m': BandInfo(6, 21, 21096000),
    '12m': BandInfo(0, 24, 24926000),
    '10m': BandInfo(4, 28, 28126000),
    '6m': BandInfo(8, 50, 50294400),
    '4m': BandInfo(2, 70, 70092400),
    '2m': BandInfo(6, 144, 144490400),
    '70cm': BandInfo(0, 432, 432301400),
    '23cm': BandInfo(4, 1296, 1296501400),
}


def band_info(band: str) -> BandInfo:
    """
    look up a band by name, e.g. `20m`

    :param band: band name
    :return: band information
    """

    try:
        return BANDS[band.strip().lower()]
    except (AttributeError, KeyError):
        raise ValueError(f'unrecognized band "{band}" - expected one of {list(BANDS)}')
