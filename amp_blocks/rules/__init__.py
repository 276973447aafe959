# amp_blocks/rules/__init__.py

from .archives import ampify_archives_block
from .attributes import inject_block_attributes
from .categories import ampify_categories_block
from .file import ampify_file_block
from .navigation import ampify_navigation_block
from .placeholder import suppress_empty_media_placeholder
from .result import RewriteResult
from .video import ampify_video_block

__all__ = [
    "RewriteResult",
    "ampify_archives_block",
    "ampify_categories_block",
    "ampify_file_block",
    "ampify_navigation_block",
    "ampify_video_block",
    "inject_block_attributes",
    "suppress_empty_media_placeholder",
]
