"""Opcode layout generator for the W4ON2 compact event stream."""

from .descriptors import (  # noqa: F401
    OPCODE_SPACE,
    W4ON2_EVENTS,
    EventDescriptor,
    event,
)
from .layout import (  # noqa: F401
    DEFAULT_PREFIX,
    Span,
    SpanLayout,
    TableOverflowError,
    assign_spans,
    format_span_table,
)
from .render import (  # noqa: F401
    BANNER,
    SEPARATOR,
    define,
    format_offset,
    render_definitions,
    render_lines,
    render_text,
)
from .header import (  # noqa: F401
    find_block,
    is_current,
    splice_block,
    updated_header,
    write_if_changed,
)
