"""Block description templates.

Recognized tokens: $Block, $Duration, $StartTime, $EndTime. Anything else
is left as written.
"""

from .timefmt import format_duration, format_to_12_hour, normalize_to_24_hour
from .types import Block


def render_description(template: str, block: Block) -> list[str]:
    """Expand the template for a block into non-empty, stripped display lines."""
    rendered = (
        template.replace("$Block", block.block_name)
        .replace("$Duration", format_duration(block.duration_minutes))
        .replace("$StartTime", format_to_12_hour(normalize_to_24_hour(block.start_time)))
        .replace("$EndTime", format_to_12_hour(normalize_to_24_hour(block.end_time)))
    )
    lines = []
    for line in rendered.split("\n"):
        stripped = line.strip()
        if stripped:
            lines.append(stripped)
    return lines
