"""
Rewrite rendered WordPress block and widget markup into AMP-valid HTML.
"""

from .context import RenderSession
from .exceptions import (
    AttributeCoercionFailure,
    BlockRewriteError,
    ParseFailure,
    StructuralMismatch,
)
from .transformer import BlockDescriptor, BlockKind, transform, transform_blocks
from .widgets import (
    preserve_widget_text_element_dimensions,
    restore_preserved_dimensions,
    sanitize_raw_embeds,
)

__all__ = (
    "AttributeCoercionFailure",
    "BlockDescriptor",
    "BlockKind",
    "BlockRewriteError",
    "ParseFailure",
    "RenderSession",
    "StructuralMismatch",
    "preserve_widget_text_element_dimensions",
    "restore_preserved_dimensions",
    "sanitize_raw_embeds",
    "transform",
    "transform_blocks",
)
