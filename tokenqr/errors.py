#
# Exceptions raised by the QR-code encoder.
#

class QRError(Exception):
    """Base class for every error raised by tokenqr."""


class CapacityError(QRError, ValueError):
    """The payload does not fit into the requested (or any) QR-code version."""


class TableLookupError(QRError, LookupError):
    """A static table has no entry for the requested key."""


class InvalidVersionLevelError(TableLookupError):
    """Unsupported version / error correction level combination."""


class InvalidMaskPatternError(TableLookupError):
    """Mask pattern outside 0..7."""


class FieldDomainError(QRError, ValueError):
    """Discrete logarithm requested for a value that has none."""


class InvalidTokenError(QRError, ValueError):
    """Session token is not 32 hexadecimal characters."""
