#
# Session tokens shown to the user as a QR-code.
#

import logging
import re

from . import qrcoder
from . import rsblock
from .errors import InvalidTokenError

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"[0-9a-fA-F]{32}")

# Tokens are always encoded at this level
TOKEN_LEVEL = rsblock.QR_ECC_Q


#
def is_valid_token(token) -> bool:
    return isinstance(token, str) and TOKEN_RE.fullmatch(token) is not None


#
def encode_token(token : str) -> qrcoder.encode:
    """Validate a session token and encode it.

        Raises:
        -------
        InvalidTokenError
            If the token is not 32 hexadecimal characters.
    """
    if (not is_valid_token(token)):
        raise InvalidTokenError(f"Invalid token: {token if token else 'Not found'}")

    qr = qrcoder.make_qr(token, TOKEN_LEVEL)
    logger.debug("Token encoded as version %d mask %d", qr.version, qr.mask)
    return qr
