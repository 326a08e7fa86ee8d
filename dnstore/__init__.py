# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
DNStore - A Pure Python .DS_Store Reader

Decodes the "Bud1" buddy-allocated B-tree that macOS Finder writes to
.DS_Store files and describes every stored field in readable form:
window geometry, icon positions, view modes, dates and embedded
property lists.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from dnstore.diagnostics import Diagnostics
from dnstore.ds_store_parser import DSStore, DSStoreParser
from dnstore.exceptions import (
    DNStoreError,
    MetadataReadError,
    MissingDirectoryKeyError,
    TruncatedDataError,
    TreeStructureError,
    UnrecognizedTypeError,
    FieldFormatError,
    PlistDecodeError,
)
from dnstore.field_interpreter import FieldInterpreter
from dnstore.generic_renderer import GenericRenderer
from dnstore.value_decoder import DecodedValue, TypedValueDecoder, ValueKind, decode_value

__all__ = [
    "DSStore",
    "DSStoreParser",
    "Diagnostics",
    "DNStoreError",
    "MetadataReadError",
    "MissingDirectoryKeyError",
    "TruncatedDataError",
    "TreeStructureError",
    "UnrecognizedTypeError",
    "FieldFormatError",
    "PlistDecodeError",
    "FieldInterpreter",
    "GenericRenderer",
    "DecodedValue",
    "TypedValueDecoder",
    "ValueKind",
    "decode_value",
]
