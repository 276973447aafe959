# amp_blocks/transformer.py
"""
Entry point for ampifying rendered blocks.

``transform`` takes the rendered markup of one block and its descriptor,
splices the block's AMP props into the first tag, then dispatches to the rule
for the block kind. Rendering is never blocked: when a rule declines, or fails
for any reason, the markup is returned as it was before the rule ran.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .context import RenderSession
from .exceptions import BlockRewriteError
from .rules import (
    ampify_archives_block,
    ampify_categories_block,
    ampify_file_block,
    ampify_navigation_block,
    ampify_video_block,
    inject_block_attributes,
    suppress_empty_media_placeholder,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockDescriptor:
    name: str
    attributes: Mapping = field(default_factory=dict)

    @classmethod
    def from_block(cls, block: Mapping) -> "BlockDescriptor":
        """Build a descriptor from a parsed block dict (``blockName``/``attrs``)."""
        return cls(name=block.get("blockName") or "", attributes=block.get("attrs") or {})


class BlockKind(Enum):
    CATEGORIES = "core/categories"
    ARCHIVES = "core/archives"
    VIDEO = "core/video"
    FILE = "core/file"
    NAVIGATION = "core/navigation"
    IMAGE = "core/image"
    AUDIO = "core/audio"
    SHORTCODE = "core/shortcode"
    DEFAULT = ""

    @classmethod
    def from_name(cls, name: str) -> "BlockKind":
        try:
            return cls(name)
        except ValueError:
            return cls.DEFAULT

    @property
    def rule(self):
        """Rewrite rule for this kind, or None when only the attribute splice applies."""
        return _RULES.get(self)

    @property
    def accepts_attributes(self) -> bool:
        # Shortcode output is arbitrary markup, so its first tag is not the block's.
        return self is not BlockKind.SHORTCODE


_RULES = {
    BlockKind.CATEGORIES: ampify_categories_block,
    BlockKind.ARCHIVES: ampify_archives_block,
    BlockKind.VIDEO: ampify_video_block,
    BlockKind.FILE: ampify_file_block,
    BlockKind.NAVIGATION: ampify_navigation_block,
    BlockKind.IMAGE: suppress_empty_media_placeholder,
    BlockKind.AUDIO: suppress_empty_media_placeholder,
}


def transform(html: str, block, session: Optional[RenderSession] = None) -> str:
    """
    Filter the rendered content of a single block to make it AMP valid.

    Args:
        html: The rendered block markup
        block: BlockDescriptor, or a parsed block dict with ``blockName`` and ``attrs``
        session: RenderSession for the current page render. Without one, a
            session is built from the configuration for this call only, so ids
            are not unique across blocks.

    Returns:
        The filtered markup; the input itself whenever no rule applies
    """
    if isinstance(block, Mapping):
        block = BlockDescriptor.from_block(block)

    if not block.name:
        return html

    if not isinstance(html, str):
        logger.warning(f"Skipping {block.name} block: markup is {type(html).__name__}, not str")
        return html

    if session is None:
        session = RenderSession.from_config()

    kind = BlockKind.from_name(block.name)
    if isinstance(block.attributes, Mapping):
        attrs = dict(block.attributes)
    else:
        if block.attributes:
            logger.debug(
                f"Ignoring {block.name} block attributes: "
                f"{type(block.attributes).__name__} is not a mapping"
            )
        attrs = {}

    if attrs and kind.accepts_attributes:
        try:
            html = inject_block_attributes(html, attrs)
        except BlockRewriteError as e:
            logger.debug(f"Not injecting AMP attributes into {block.name} block: {e}")

    rule = kind.rule
    if rule is None:
        return html

    try:
        result = rule(html, attrs, session)
    except BlockRewriteError as e:
        logger.debug(f"Leaving {block.name} block unchanged: {e}")
        return html
    except Exception as e:
        logger.warning(f"Ampifying {block.name} block failed: {e}", exc_info=True)
        return html

    if not result.changed:
        logger.debug(f"Leaving {block.name} block unchanged: {result.reason}")
        return html
    return result.html


def transform_blocks(blocks: Iterable, session: Optional[RenderSession] = None) -> str:
    """
    Transform ``(html, block)`` pairs of one page render, in order, and join them.

    All blocks share one session so that generated ids stay unique on the page.
    """
    if session is None:
        session = RenderSession.from_config()
    return "".join(transform(html, block, session) for html, block in blocks)
