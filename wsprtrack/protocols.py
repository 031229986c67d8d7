from enum import Enum


class Correlation(Enum):
    """ rule deciding whether a supplementary transmission belongs to the spot opened by the primary one """

    UNCONDITIONAL = 'unconditional'
    LOCATOR_EQUALITY = 'locator_equality'
    CORECEPTION = 'coreception'
    NONE = 'none'


class PayloadFamily(Enum):
    DENSE_NUMERIC = 'dense_numeric'
    TWO_MESSAGE = 'two_message'
    PRIMARY_ONLY = 'primary_only'
    PASSTHROUGH = 'passthrough'


class Protocol(Enum):
    """
    telemetry encoding conventions, each with its number of slots per cycle, correlation rule, and payload layout
    """

    U4B = ('u4b', 5, Correlation.CORECEPTION, PayloadFamily.DENSE_NUMERIC)
    WB8ELK = ('wb8elk', 2, Correlation.LOCATOR_EQUALITY, PayloadFamily.TWO_MESSAGE)
    ZACHTEK1 = ('zachtek1', 1, Correlation.NONE, PayloadFamily.PRIMARY_ONLY)
    ZACHTEK2 = ('zachtek2', 2, Correlation.UNCONDITIONAL, PayloadFamily.TWO_MESSAGE)
    GENERIC1 = ('generic1', 1, Correlation.NONE, PayloadFamily.PASSTHROUGH)
    GENERIC2 = ('generic2', 5, Correlation.CORECEPTION, PayloadFamily.PASSTHROUGH)
    UNKNOWN = ('unknown', 1, Correlation.NONE, PayloadFamily.PASSTHROUGH)

    def __init__(
        self, tag: str, slots: int, correlation: Correlation, payload: PayloadFamily
    ):
        self.tag = tag
        self.slots = slots
        self.correlation = correlation
        self.payload = payload

    @property
    def primary_only(self) -> bool:
        """ whether the protocol has no higher-resolution fix than the primary transmission's locator """
        return self.slots == 1

    @classmethod
    def from_string(cls, value: str) -> 'Protocol':
        if isinstance(value, cls):
            return value
        for protocol in cls:
            if protocol.tag == str(value).strip().lower():
                return protocol
        raise ValueError(
            f'unrecognized protocol "{value}" - expected one of {[protocol.tag for protocol in cls]}'
        )

    def __str__(self) -> str:
        return self.tag
