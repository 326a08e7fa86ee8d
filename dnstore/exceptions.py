# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for DNStore

This module defines custom exceptions for the DNStore library.
Fatal decode errors derive from MetadataReadError; field-level
problems are raised as FieldFormatError and never leave the
field interpreter.

Copyright 2025 DNAi inc.
"""


class DNStoreError(Exception):
    """
    Base exception for all DNStore errors.

    All DNStore exceptions inherit from this class, allowing
    catch-all error handling for any DNStore-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(DNStoreError):
    """
    Raised when a DS_Store file cannot be read or decoded.

    This exception is raised when:
    - The file cannot be opened or read
    - The buddy allocator structure cannot be parsed
    - The B-tree cannot be traversed
    """
    pass


class MissingDirectoryKeyError(MetadataReadError):
    """
    Raised when the allocator directory has no 'DSDB' entry.

    Without that entry there is no B-tree master block to walk.
    """
    pass


class TruncatedDataError(MetadataReadError):
    """
    Raised when a read would run past the end of the buffer.
    """
    pass


class TreeStructureError(MetadataReadError):
    """
    Raised when the B-tree references a block id outside the
    offset table or visits the same block twice.
    """
    pass


class UnrecognizedTypeError(MetadataReadError):
    """
    Raised when an entry carries a primitive type tag the decoder
    does not know. The payload length is unknown, so the walk cannot
    continue past it.
    """
    pass


class FieldFormatError(DNStoreError):
    """
    Raised when a known field holds a value of the wrong type or length.
    """
    pass


class PlistDecodeError(DNStoreError):
    """
    Raised when an embedded property list cannot be decoded.
    """
    pass
