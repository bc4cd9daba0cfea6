# crossbuild/core/use_cases/combine_artifacts.py
from pathlib import Path
from typing import Sequence

import structlog

from crossbuild.core.domain.exceptions import ResourceMissingError
from crossbuild.core.domain.models import CombinePart
from crossbuild.core.use_cases.build_directory import read_source_text, write_text_atomic

logger = structlog.get_logger()

PART_SEPARATOR = "\n\n"


def render_part(part: CombinePart) -> str:
    """Marker lines first, then the part's content, each closed by a blank line."""
    if part.source is not None:
        if not part.source.is_file():
            raise ResourceMissingError(part.source)
        content = read_source_text(part.source)
    else:
        content = part.text or ""

    head = "".join(marker + PART_SEPARATOR for marker in part.markers)
    return head + content + PART_SEPARATOR


class ArtifactCombiner:
    """
    Use Case: Stitches toolchain outputs into a single platform file.

    Parts are written in exactly the order given; symbol resolution in the
    downstream toolchain depends on it. Every part is rendered before the
    destination is written, and the write is atomic, so a failed combine
    leaves no combined file behind.
    """

    def combine(self, parts: Sequence[CombinePart], destination: Path) -> Path:
        try:
            rendered = [render_part(part) for part in parts]
        except Exception:
            # A file left over from an earlier run must not pass for this one
            destination.unlink(missing_ok=True)
            raise

        write_text_atomic(destination, "".join(rendered))
        logger.info(
            "artifacts_combined",
            destination=str(destination),
            parts=[part.label for part in parts],
        )
        return destination
