# amp_blocks/rules/video.py

import logging
import re

from ..exceptions import AttributeCoercionFailure, StructuralMismatch
from .result import RewriteResult

logger = logging.getLogger(__name__)

_VIDEO_TAG_RE = re.compile(r"<video(?=[\s/>])", re.IGNORECASE)


def _dimension(metadata: dict, key: str) -> int:
    value = metadata[key]
    if isinstance(value, bool):
        raise AttributeCoercionFailure(f"Video {key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise AttributeCoercionFailure(f"Video {key} must be an integer, got {value!r}") from e


def ampify_video_block(html, attrs, session):
    """
    Inject the attachment's dimensions into the video block's ``<video>``.

    Knowing the dimensions up front saves the AMP video sanitizer from
    looking the attachment up by URL.

    Args:
        html: Rendered block markup
        attrs: Block attributes; ``id`` is the media attachment id
        session: Current RenderSession, providing ``get_media_dimensions``

    Returns:
        RewriteResult with ``width``/``height`` added to each ``<video`` tag
    """
    attachment_id = attrs.get("id")
    if not attachment_id:
        return RewriteResult.unchanged("no attachment id")

    metadata = session.get_media_dimensions(attachment_id)
    if not metadata or "width" not in metadata or "height" not in metadata:
        logger.debug(f"No dimensions known for video attachment {attachment_id}")
        return RewriteResult.unchanged("attachment dimensions unavailable")

    width = _dimension(metadata, "width")
    height = _dimension(metadata, "height")

    html, replaced = _VIDEO_TAG_RE.subn(
        lambda m: f'{m.group(0)} width="{width}" height="{height}"', html
    )
    if not replaced:
        raise StructuralMismatch("no <video> element in video block")
    return RewriteResult.rewritten(html)
