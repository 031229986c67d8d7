from wsprtrack.channels import Channel
from wsprtrack.pipeline import reconstruct_track
from wsprtrack.protocols import Protocol

__all__ = ['Channel', 'reconstruct_track', 'Protocol']
