# amp_blocks/rules/placeholder.py

import re

from .result import RewriteResult

_MEDIA_SOURCE_RE = re.compile(r"src=|<source")


def suppress_empty_media_placeholder(html, attrs, session):
    """
    Empty out image and audio block placeholders.

    Without a source the placeholders render a bare ``<img>``/``<audio>``,
    which is invalid AMP. ``<source>`` is accepted as well so that a
    ``<picture>`` based image block keeps its markup.
    """
    if _MEDIA_SOURCE_RE.search(html):
        return RewriteResult.unchanged("media element has a source")
    return RewriteResult.rewritten("")
