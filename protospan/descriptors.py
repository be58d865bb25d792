"""Event descriptor table for the W4ON2 compact event stream.

Each descriptor reserves ``width`` consecutive opcode values.  Width-1
kinds occupy a single opcode byte; wider kinds encode a small number
directly in the opcode (``SHORT_DELTA`` covers delays of 1..50 frames,
``NOTE_ON`` covers MIDI keys 0..127).  Operand labels name the raw bytes
that follow the opcode, in order.

Opcode map for the shipped table (offsets in hex):
  0x00        LONG_DELTA            [UpperBits][LowerBits]
  0x01        LONG_DELTA_NOTES_OFF  [UpperBits][LowerBits]
  0x02-0x33   SHORT_DELTA
  0x34-0x65   SHORT_DELTA_NOTES_OFF
  0x66-0xE5   NOTE_ON
  0xE6        NOTES_OFF
  0xE7-0xE8   SET_FLAGS, SET_VOLUME
  0xE9-0xEB   SET_PAN
  0xEC-0xF5   SET_VELOCITY .. SET_VIBRATO
  0xF6        first unused value

Reordering rows moves every opcode after the change.  That is how the
runtime and the converter notice a format change: their constants shift.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

OPCODE_SPACE = 256

_KIND_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class EventDescriptor:
    """One row of the opcode table."""

    kind: str
    width: int = 1
    operand_labels: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, str) or not _KIND_RE.fullmatch(self.kind):
            raise ValueError(f"kind {self.kind!r} must be a C identifier")
        if not isinstance(self.width, int) or isinstance(self.width, bool):
            raise ValueError(f"{self.kind}.width must be an integer")
        if self.width < 1:
            raise ValueError(f"{self.kind}.width must be >= 1, got {self.width}")
        if isinstance(self.operand_labels, str):
            raise ValueError(
                f"{self.kind}.operand_labels must be a sequence of labels, not a string"
            )
        labels = tuple(self.operand_labels)
        for label in labels:
            if not isinstance(label, str):
                raise ValueError(f"{self.kind} operand label {label!r} must be a string")
            if "\n" in label:
                raise ValueError(f"{self.kind} operand label {label!r} spans lines")
        # Accept lists from callers but keep the record hashable.
        object.__setattr__(self, "operand_labels", labels)

    @property
    def operand_count(self) -> int:
        return len(self.operand_labels)

    @property
    def size(self) -> int:
        """Encoded length in bytes: the opcode plus one byte per operand."""

        return 1 + self.operand_count


def event(kind: str, width: int = 1, *operand_labels: str) -> EventDescriptor:
    """Shorthand matching the row shape ``(kind, width, *labels)``."""

    return EventDescriptor(kind=kind, width=width, operand_labels=operand_labels)


W4ON2_EVENTS: Tuple[EventDescriptor, ...] = (
    # Note
    event("LONG_DELTA", 1, "UpperBits", "LowerBits"),
    event("LONG_DELTA_NOTES_OFF", 1, "UpperBits", "LowerBits"),
    event("SHORT_DELTA", 50),
    event("SHORT_DELTA_NOTES_OFF", 50),
    event("NOTE_ON", 128),
    event("NOTES_OFF", 1),
    event("SET_FLAGS", 1, "WASM-4 `flags`"),
    event("SET_VOLUME", 1, "Volume"),
    event("SET_PAN", 3),
    event("SET_VELOCITY", 1, "Velocity"),
    event("SET_ADSR", 1, "A", "D", "S", "R"),
    event("SET_A", 1, "A"),
    event("SET_D", 1, "D"),
    event("SET_S", 1, "S"),
    event("SET_R", 1, "R"),
    event("SET_PITCH_ENV", 1, "NoteOffset", "Duration"),
    event("SET_ARP_RATE", 1, "Rate"),
    event("SET_PORTAMENTO", 1, "Portamento"),
    event("SET_VIBRATO", 1, "Speed", "Depth"),
)
