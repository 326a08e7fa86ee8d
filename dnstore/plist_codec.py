# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Property list decoding for blobs embedded in DS_Store fields

Copyright 2025 DNAi inc.
"""

import plistlib
import xml.parsers.expat
from typing import Any

from dnstore.exceptions import PlistDecodeError

BINARY_PLIST_MAGIC = b'bplist'


def is_binary_plist(data: bytes) -> bool:
    """
    Check for the binary property list header: 'bplist' followed by a
    two-digit version such as '00'.
    """
    return (
        len(data) >= 8
        and data.startswith(BINARY_PLIST_MAGIC)
        and data[6:8].isdigit()
    )


def decode(data: bytes) -> Any:
    """
    Decode a binary or XML property list.

    Args:
        data: Property list bytes

    Returns:
        Decoded value (dict, list, str, int, float, bool, bytes, datetime, UID)

    Raises:
        PlistDecodeError: If the data is not a valid property list
    """
    try:
        return plistlib.loads(bytes(data))
    except (plistlib.InvalidFileException, ValueError, TypeError, KeyError,
            IndexError, OverflowError, xml.parsers.expat.ExpatError) as exc:
        raise PlistDecodeError(f"Invalid property list: {exc}") from exc
