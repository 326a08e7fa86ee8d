# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Indented text rendering of nested values

Renders property list values (dicts, lists, scalars and byte blobs) as
lines with one tab per nesting level. Byte blobs are inspected for
formats that commonly appear inside DS_Store fields:
- Binary property lists ('bplist00')
- macOS bookmark/alias data ('book')
- Embedded DS_Store data ('Bud1' without the alignment word)
Anything else is shown as hexadecimal.

Copyright 2025 DNAi inc.
"""

import plistlib
from datetime import datetime
from typing import Any, List, Optional, Set

from dnstore import plist_codec
from dnstore.diagnostics import Diagnostics
from dnstore.exceptions import MetadataReadError, PlistDecodeError

ALIAS_MAGIC = b'book'
EMBEDDED_STORE_MAGIC = b'Bud1'


class GenericRenderer:
    """
    Renderer for arbitrary nested values.
    """

    INLINE_TYPES = (str, bool, int, float, bytes, bytearray, datetime, plistlib.UID)

    RECURSIVE_MARKER = '(recursive reference)'

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = Diagnostics() if diagnostics is None else diagnostics
        # ids of the containers on the current render path
        self._active: Set[int] = set()

    def show(self, value: Any, depth: int = 0) -> List[str]:
        """
        Render a value as lines indented by ``depth`` tabs.

        Args:
            value: Value to render
            depth: Indentation level of the first line

        Returns:
            List of text lines
        """
        indent = '\t' * depth
        return [indent + line for line in self._render(value)]

    def show_one(self, value: Any) -> str:
        """Render a value as a single string."""
        return '\n'.join(self._render(value))

    def labelled(self, label: str, value: Any) -> List[str]:
        """
        Render ``label: value`` on one line when the value fits on one line,
        otherwise the label followed by the value indented one level.
        """
        return self._member(f"{label}:", value)

    def is_inline(self, value: Any) -> bool:
        return isinstance(value, self.INLINE_TYPES)

    @staticmethod
    def format_scalar(value: Any) -> str:
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, float):
            return f"{value:f}"
        if isinstance(value, datetime):
            return value.isoformat(sep=' ')
        if isinstance(value, plistlib.UID):
            return f"UID({value.data})"
        if value is None:
            return ''
        return str(value)

    @staticmethod
    def hex_dump(data: bytes) -> str:
        return f"0x{bytes(data).hex()}"

    def _render(self, value: Any) -> List[str]:
        if isinstance(value, (dict, list, tuple)):
            # Binary plists may reference their own containers
            if id(value) in self._active:
                self.diagnostics.warn("Property list contains a reference to itself")
                return [self.RECURSIVE_MARKER]
            self._active.add(id(value))
            try:
                return self._render_container(value)
            finally:
                self._active.discard(id(value))
        if isinstance(value, (bytes, bytearray)):
            return self._render_bytes(bytes(value))
        return [self.format_scalar(value)]

    def _render_container(self, value: Any) -> List[str]:
        lines = []
        if isinstance(value, dict):
            for key, item in value.items():
                lines.extend(self._member(f"{key}:", item))
        else:
            for item in value:
                lines.extend(self._member('-', item))
        return lines

    def _member(self, label: str, item: Any) -> List[str]:
        nested = self._render(item)
        if self.is_inline(item) and len(nested) == 1:
            return [f"{label} {nested[0]}"]
        return [label] + ['\t' + line for line in nested]

    def _render_bytes(self, data: bytes) -> List[str]:
        if plist_codec.is_binary_plist(data):
            try:
                return self._render(plist_codec.decode(data))
            except PlistDecodeError as exc:
                self.diagnostics.warn(f"Embedded property list not decoded: {exc.message}")
                return [self.hex_dump(data)]

        if data.startswith(ALIAS_MAGIC):
            return [f"(in macOS alias type, unparsed) {data!r}"]

        if data.startswith(EMBEDDED_STORE_MAGIC):
            lines = self._render_embedded_store(data)
            if lines is not None:
                return lines

        return [self.hex_dump(data)]

    def _render_embedded_store(self, data: bytes) -> Optional[List[str]]:
        # Imported here: the interpreter itself renders through this class
        from dnstore.allocator import ALIGNMENT_WORD
        from dnstore.ds_store_parser import DSStoreParser
        from dnstore.field_interpreter import FieldInterpreter

        # Embedded stores omit the leading alignment word
        content = ALIGNMENT_WORD.to_bytes(4, 'big') + data
        try:
            store = DSStoreParser(file_data=content, diagnostics=self.diagnostics).parse()
        except MetadataReadError as exc:
            self.diagnostics.warn(f"Embedded DS_Store not decoded: {exc.message}")
            return None

        return FieldInterpreter(self.diagnostics, renderer=self).report(store.records)
