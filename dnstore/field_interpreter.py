# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Human-readable interpretation of DS_Store record fields

Each field code Finder writes has its own encoding: plain integers and
strings, fixed-size binary structures (window geometry, icon positions,
view options), property lists stored as blobs, and Mac epoch dates.
FieldInterpreter maps every known code to a handler through a static
table. Unknown codes are shown raw.

A value of the wrong type or length for its field never aborts the
record: a warning is recorded and a best-effort line is rendered.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Any, Iterable, List, Optional, Tuple

from dnstore import plist_codec
from dnstore.date_formatter import DateFormatter
from dnstore.diagnostics import Diagnostics
from dnstore.exceptions import FieldFormatError, PlistDecodeError
from dnstore.generic_renderer import GenericRenderer
from dnstore.record_store import Record
from dnstore.value_decoder import DecodedValue, ValueKind

VIEW_STYLES = {
    'icnv': 'Icon view',
    'clmv': 'Column view',
    'Nlsv': 'List view',
    'Flwv': 'Coverflow view',
}

# 'vstl' also knows the gallery view introduced after 'fwi0' stopped being updated
VIEW_STYLES_EXTENDED = dict(VIEW_STYLES, glyv='Gallery view')

ICON_ARRANGEMENTS = {
    'none': 'None',
    'grid': 'Snap to Grid',
}

LABEL_POSITIONS = {
    'botm': 'Bottom',
    'rght': 'Right',
}


class FieldInterpreter:
    """
    Interpreter for the fields of a DS_Store record.

    FIELD_HANDLERS maps a field code to the handler method name and any
    extra arguments passed to it after (record name, field code, value).
    """

    FIELD_HANDLERS = {
        'BKGD': ('_background',),
        'GRP0': ('_simple', 'text', '{code} (unknown)'),
        'ICVO': ('_simple', 'bool', '{code} (unknown)'),
        'Iloc': ('_icon_location',),
        'LSVO': ('_simple', 'bool', '{code} (unknown)'),
        'bwsp': ('_property_list', 'Layout property list'),
        'cmmt': ('_simple', 'text', 'Comments'),
        'dilc': ('_desktop_icon_location',),
        'dscl': ('_simple', 'bool', 'Open in list view'),
        'extn': ('_simple', 'text', 'Extension'),
        'fwi0': ('_window_info',),
        'fwsw': ('_simple', 'int', 'Finder window sidebar width'),
        'fwvh': ('_simple', 'int',
                 'Finder window vertical height (overrides Finder window information)'),
        'icgo': ('_raw_bytes', '{code} (unknown)', (8,)),
        'icsp': ('_raw_bytes', '{code} (unknown)', (8,)),
        'icvo': ('_icon_view_options',),
        'icvp': ('_property_list', 'Icon view property list'),
        'info': ('_raw_bytes', '{code} (unknown)', ()),
        'lg1S': ('_simple', 'int', 'Logical size', 'B'),
        'logS': ('_simple', 'int', 'Logical size', 'B'),
        'lssp': ('_raw_bytes', '{code} (unknown, List view scroll position?)', (8,)),
        'lsvC': ('_property_list', 'List view properties, alternative'),
        'lsvP': ('_property_list', 'List view properties, other alternative'),
        'lsvo': ('_raw_bytes', 'List view options (format unknown)', (76,)),
        'lsvp': ('_property_list', 'List view properties'),
        'lsvt': ('_simple', 'int', 'List view text size', 'pt'),
        'moDD': ('_modification_date', 'Modification date'),
        'modD': ('_modification_date', 'Modification date, alternative'),
        'pBBk': ('_raw_value', 'Background picture bookmark'),
        'ph1S': ('_simple', 'int', 'Physical size', 'B'),
        'phyS': ('_simple', 'int', 'Physical size', 'B'),
        'pict': ('_raw_value', 'Picture'),
        'vSrn': ('_simple', 'int', '{code} (unknown)'),
        'vstl': ('_view_style',),
    }

    def __init__(self, diagnostics: Optional[Diagnostics] = None,
                 renderer: Optional[GenericRenderer] = None):
        """
        Initialize the interpreter.

        Args:
            diagnostics: Warning sink, a private one is created when omitted
            renderer: Renderer for raw and nested values, sharing the same sink by default
        """
        self.diagnostics = Diagnostics() if diagnostics is None else diagnostics
        self.renderer = GenericRenderer(self.diagnostics) if renderer is None else renderer

    def report(self, records: Iterable[Record]) -> List[str]:
        """
        Render records as report lines: each record name followed by its
        interpreted field lines indented by one tab.
        """
        lines = []
        for record in records:
            lines.append(record.name)
            lines.extend('\t' + line for line in self.interpret(record))
        return lines

    def interpret(self, record: Record) -> List[str]:
        lines = []
        for code, value in record.fields.items():
            lines.extend(self.interpret_field(record.name, code, value))
        return lines

    def interpret_field(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        """
        Interpret one field value.

        Args:
            record_name: Name of the record the field belongs to (for warnings)
            code: Four-character field code
            value: Decoded value

        Returns:
            One or more lines describing the field
        """
        handler = self.FIELD_HANDLERS.get(code)
        if handler is None:
            return self._unrecognized(code, value)

        method_name, *args = handler
        try:
            return getattr(self, method_name)(record_name, code, value, *args)
        except FieldFormatError as exc:
            self._warn(record_name, code, exc.message)
            return self._unrecognized(code, value)

    def _warn(self, record_name: str, code: str, message: str) -> None:
        self.diagnostics.warn(f"{record_name!r} {code} {message}")

    def _unrecognized(self, code: str, value: DecodedValue) -> List[str]:
        return self.renderer.labelled(f"{code} (unrecognized)", value.value)

    def _kind_matches(self, value: DecodedValue, expected: str) -> bool:
        if expected == 'bool':
            return value.kind is ValueKind.BOOL
        if expected == 'int':
            return value.is_integer
        if expected == 'text':
            return value.is_text
        return value.kind is ValueKind.BLOB

    def _check_kind(self, record_name: str, code: str, value: DecodedValue, expected: str) -> bool:
        if self._kind_matches(value, expected):
            return True
        self._warn(record_name, code, f"not {expected} (stored as {value.type_code!r})")
        return False

    def _require_bytes(self, value: DecodedValue, lengths: Tuple[int, ...] = ()) -> bytes:
        if value.kind is not ValueKind.BLOB:
            raise FieldFormatError(f"not bytes (stored as {value.type_code!r})")
        data = value.value
        if lengths and len(data) not in lengths:
            raise FieldFormatError(
                f"{self.renderer.hex_dump(data)} not of length {list(lengths)}"
            )
        return data

    def _simple(self, record_name: str, code: str, value: DecodedValue,
                expected: str, label: str, unit: str = '') -> List[str]:
        label = label.format(code=code)
        if not self._check_kind(record_name, code, value, expected):
            return self.renderer.labelled(label, value.value)
        return [f"{label}: {self.renderer.format_scalar(value.value)}{unit}"]

    def _raw_bytes(self, record_name: str, code: str, value: DecodedValue,
                   label: str, lengths: Tuple[int, ...]) -> List[str]:
        label = label.format(code=code)
        if self._check_kind(record_name, code, value, 'bytes'):
            if lengths and len(value.value) not in lengths:
                self._warn(record_name, code,
                           f"{self.renderer.hex_dump(value.value)} not of length {list(lengths)}")
        return self.renderer.labelled(label, value.value)

    def _raw_value(self, record_name: str, code: str, value: DecodedValue, label: str) -> List[str]:
        return self.renderer.labelled(label, value.value)

    def _property_list(self, record_name: str, code: str, value: DecodedValue,
                       label: str) -> List[str]:
        data = self._require_bytes(value)
        try:
            decoded: Any = plist_codec.decode(data)
        except PlistDecodeError as exc:
            self._warn(record_name, code, exc.message)
            return [f"{label}:", '\t' + self.renderer.hex_dump(data)]
        return [f"{label}:"] + self.renderer.show(decoded, 1)

    def _background(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        data = self._require_bytes(value, (12,))
        background_type = data[0:4].decode('mac_roman')
        if background_type == 'DefB':
            return ["Background: Default"]
        if background_type == 'ClrB':
            return [f"Background: Color #{data[4:10].hex()}"]
        if background_type == 'PctB':
            return ['Background: Picture, see "Picture" field']
        self._warn(record_name, code, f"Unrecognized background type {background_type!r}")
        return self.renderer.labelled("Background (unrecognized)", data)

    def _icon_location(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        data = self._require_bytes(value, (16,))
        x, y = struct.unpack('>II', data[0:8])
        return [f"Icon location: x {x}px, y {y}px, {self.renderer.hex_dump(data[8:16])}"]

    def _desktop_icon_location(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        data = self._require_bytes(value, (32,))
        # Thousandths of a percent of the screen size
        x, y = struct.unpack('>ii', data[16:24])
        return [
            f"Icon location on desktop: x {x / 1000:.3f}%, y {y / 1000:.3f}%, "
            f"{self.renderer.hex_dump(data[0:16])}, {self.renderer.hex_dump(data[24:32])}"
        ]

    def _window_info(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        data = self._require_bytes(value, (16,))
        top, left, bottom, right = struct.unpack('>hhhh', data[0:8])
        view_tag = data[8:12].decode('mac_roman')
        view = VIEW_STYLES.get(view_tag, f"(unrecognized) {view_tag}")
        return [
            "Finder window information:",
            f"\tWindow rectangle: top {top}, left {left}, bottom {bottom}, right {right}",
            f"\tView style (might be overtaken): {view}",
            f"\tUnknown: {self.renderer.hex_dump(data[12:16])}",
        ]

    def _icon_view_options(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        data = self._require_bytes(value)
        if len(data) < 4:
            raise FieldFormatError(f"{self.renderer.hex_dump(data)} too short for icon view options")

        lines = ["Icon view options:"]
        options_type = data[0:4].decode('mac_roman')
        if options_type == 'icvo':
            if len(data) != 18:
                self._warn(record_name, code, "icvo data not length 18")
                lines.append("\t(unrecognized icvo)")
                return lines
            flags = data[4:12]
            size = struct.unpack('>h', data[12:14])[0]
            arrange_tag = data[14:18].decode('mac_roman')
            arrange = ICON_ARRANGEMENTS.get(arrange_tag, f"(unknown) {arrange_tag}")
            lines.extend([
                f"\tFlags (?): {self.renderer.hex_dump(flags)}",
                f"\tSize: {size}px",
                f"\tKeep arranged by: {arrange}",
            ])
        elif options_type == 'icv4':
            if len(data) != 26:
                self._warn(record_name, code, "icv4 data not length 26")
                lines.append("\t(unrecognized icv4)")
                return lines
            size = struct.unpack('>h', data[4:6])[0]
            arrange_tag = data[6:10].decode('mac_roman')
            arrange = ICON_ARRANGEMENTS.get(arrange_tag, f"(unknown) {arrange_tag}")
            label_tag = data[10:14].decode('mac_roman')
            label = LABEL_POSITIONS.get(label_tag, f"(unknown) {label_tag}")
            flags = data[14:26]
            show_info = bool(flags[1] & 0x01)
            show_preview = bool(flags[11] & 0x01)
            lines.extend([
                f"\tSize: {size}px",
                f"\tKeep arranged by: {arrange}",
                f"\tLabel position: {label}",
                "\tFlags (partially known):",
                f"\t\tRaw flags: {self.renderer.hex_dump(flags)}",
                f"\t\tShow item info: {self.renderer.format_scalar(show_info)}",
                f"\t\tShow icon preview: {self.renderer.format_scalar(show_preview)}",
            ])
        else:
            self._warn(record_name, code, f"Unrecognized icon view options type {options_type!r}")
            lines.append(f"\t(unrecognized): {self.renderer.hex_dump(data)}")
        return lines

    def _modification_date(self, record_name: str, code: str, value: DecodedValue,
                           label: str) -> List[str]:
        if value.is_integer:
            # 1/65536 second ticks since 1904
            date = DateFormatter.from_mac_ticks(value.value)
            return [f"{label}: {DateFormatter.format_finder_date(date)}"]

        data = self._require_bytes(value)
        if len(data) > 8:
            self._warn(record_name, code, f"{self.renderer.hex_dump(data)} too long for a timestamp")
            return [f"{label} (timestamp, unknown): {data.hex()}"]
        if len(data) not in (2, 4, 8):
            self._warn(record_name, code, f"{self.renderer.hex_dump(data)} not of length [2, 4, 8]")
        # Little-endian, epoch and unit unknown
        timestamp = int.from_bytes(data, 'little')
        return [f"{label} (timestamp, format unknown): {timestamp}"]

    def _view_style(self, record_name: str, code: str, value: DecodedValue) -> List[str]:
        if not value.is_text:
            raise FieldFormatError(f"not text (stored as {value.type_code!r})")
        view = VIEW_STYLES_EXTENDED.get(value.value, f"(unrecognized) {value.value}")
        return [f"View style: {view}"]
