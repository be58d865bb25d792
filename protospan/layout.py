"""Assign opcode spans to event descriptors.

Offsets are a running sum of widths in table order: the descriptor at
position ``i`` starts where the one at ``i - 1`` ends.  Nothing here
reorders or packs the table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List

from .descriptors import OPCODE_SPACE, EventDescriptor

DEFAULT_PREFIX = "W4ON2_FMT_"


class TableOverflowError(ValueError):
    """The declared widths need more opcode values than a byte holds."""

    def __init__(self, total_width: int, space: int = OPCODE_SPACE) -> None:
        self.total_width = total_width
        self.space = space
        super().__init__(
            f"table needs {total_width} opcode values but only {space} exist "
            f"({total_width - space} over)"
        )


@dataclass(frozen=True)
class Span:
    index: int
    descriptor: EventDescriptor
    offset: int

    @property
    def kind(self) -> str:
        return self.descriptor.kind

    @property
    def width(self) -> int:
        return self.descriptor.width

    @property
    def end(self) -> int:
        """First opcode value past this span."""

        return self.offset + self.descriptor.width

    @property
    def is_range(self) -> bool:
        return self.descriptor.width > 1

    def id_name(self, prefix: str = DEFAULT_PREFIX) -> str:
        count = self.descriptor.operand_count
        arity = f"_ARG{count}" if count else ""
        return f"{prefix}{self.kind}{arity}_ID"

    def size_name(self, prefix: str = DEFAULT_PREFIX) -> str:
        return f"{prefix}{self.kind}_SIZE"

    # The table index keeps these unique even if a kind is repeated.
    def start_name(self, prefix: str = DEFAULT_PREFIX) -> str:
        return f"{prefix}{self.kind}_{self.index}_START"

    def count_name(self, prefix: str = DEFAULT_PREFIX) -> str:
        return f"{prefix}{self.kind}_{self.index}_COUNT"


@dataclass(frozen=True)
class SpanLayout:
    spans: List[Span]
    space: int = OPCODE_SPACE

    def __iter__(self) -> Iterator[Span]:
        return iter(self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    @property
    def total_width(self) -> int:
        return self.spans[-1].end if self.spans else 0

    @property
    def reserved(self) -> int:
        """First opcode value not claimed by any span."""

        return self.total_width

    @property
    def unused(self) -> int:
        """Opcode values left over; negative when the table overflows."""

        return self.space - self.total_width

    @property
    def overflows(self) -> bool:
        return self.unused < 0

    def check(self) -> None:
        if self.overflows:
            raise TableOverflowError(self.total_width, self.space)


def assign_spans(
    descriptors: Iterable[EventDescriptor],
    *,
    space: int = OPCODE_SPACE,
) -> SpanLayout:
    spans: List[Span] = []
    offset = 0
    for index, descriptor in enumerate(descriptors):
        spans.append(Span(index=index, descriptor=descriptor, offset=offset))
        offset += descriptor.width
    return SpanLayout(spans=spans, space=space)


def format_span_table(layout: SpanLayout) -> List[str]:
    """Human-readable opcode map, one row per span."""

    rows = [f"{'idx':>3}  {'opcodes':<11}  {'width':>5}  {'size':>4}  kind"]
    for span in layout:
        if span.is_range:
            opcodes = f"0x{span.offset:02x}-0x{span.end - 1:02x}"
        else:
            opcodes = f"0x{span.offset:02x}"
        rows.append(
            f"{span.index:>3}  {opcodes:<11}  {span.width:>5}  "
            f"{span.descriptor.size:>4}  {span.kind}"
        )
    rows.append(f"total={layout.total_width} unused={layout.unused}")
    return rows
