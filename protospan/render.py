"""Render a span layout as C ``#define`` lines.

Output shape (one descriptor shown)::

    // -----
    // protospan format definition
    #define W4ON2_FMT_SHORT_DELTA_ID 0x02
    #define W4ON2_FMT_SHORT_DELTA_SIZE 1
    #define W4ON2_FMT_SHORT_DELTA_2_START W4ON2_FMT_SHORT_DELTA_ID
    #define W4ON2_FMT_SHORT_DELTA_2_COUNT 50
    #define W4ON2_FMT_RESERVED 0x34
    // Unused values: 204
    // -----

Offsets are lowercase hex padded to two digits; every other value is
decimal.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .descriptors import EventDescriptor, W4ON2_EVENTS
from .layout import DEFAULT_PREFIX, SpanLayout, assign_spans

SEPARATOR = "// -----"
BANNER = "// protospan format definition"


def format_offset(offset: int) -> str:
    return f"0x{offset:02x}"


def define(name: str, value: object, comment: Optional[str] = None) -> str:
    line = f"#define {name} {value}"
    if comment:
        line += f" // {comment}"
    return line


def operand_comment(labels: Iterable[str]) -> str:
    return "".join(f"[{label}]" for label in labels)


def render_lines(layout: SpanLayout, *, prefix: str = DEFAULT_PREFIX) -> List[str]:
    lines = [SEPARATOR, BANNER]
    for span in layout:
        id_name = span.id_name(prefix)
        lines.append(
            define(
                id_name,
                format_offset(span.offset),
                operand_comment(span.descriptor.operand_labels),
            )
        )
        lines.append(define(span.size_name(prefix), span.descriptor.size))
        if span.is_range:
            lines.append(define(span.start_name(prefix), id_name))
            lines.append(define(span.count_name(prefix), span.width))
    lines.append(define(f"{prefix}RESERVED", format_offset(layout.reserved)))
    lines.append(f"// Unused values: {layout.unused}")
    lines.append(SEPARATOR)
    return lines


def render_text(layout: SpanLayout, *, prefix: str = DEFAULT_PREFIX) -> str:
    return "\n".join(render_lines(layout, prefix=prefix)) + "\n"


def render_definitions(
    descriptors: Iterable[EventDescriptor] = W4ON2_EVENTS,
    *,
    prefix: str = DEFAULT_PREFIX,
    strict: bool = False,
) -> str:
    """Return the full constant listing for ``descriptors``.

    With ``strict`` an overflowing table raises ``TableOverflowError``;
    otherwise the listing is produced with a negative unused count.
    """

    layout = assign_spans(descriptors)
    if strict:
        layout.check()
    return render_text(layout, prefix=prefix)
