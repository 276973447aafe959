# amp_blocks/rules/file.py

from urllib.parse import urlparse

from ..exceptions import StructuralMismatch
from .result import RewriteResult

FILE_SCRIPT_HANDLE = "wp-block-library-file"

# Some themes give the embed's parent `display: flex`, which collapses the
# PDF preview to nothing unless the embed is forced to full width.
FILE_BLOCK_STYLE = (
    '<style id="amp-wp-file-block">'
    ".wp-block-file > .wp-block-file__embed { width:100% }"
    "</style>"
)


def ampify_file_block(html, attrs, session):
    """
    Fix PDF previews in the file block.

    Adds a full-width style rule inside the block wrapper and dequeues the
    block library file script, which is not allowed in AMP.
    """
    href = attrs.get("href")
    if not attrs.get("displayPreview") or not href or not isinstance(href, str):
        return RewriteResult.unchanged("not a PDF preview")

    if not (urlparse(href).path or "").endswith(".pdf"):
        return RewriteResult.unchanged("not a PDF preview")

    position = html.find("</div>")
    if position == -1:
        raise StructuralMismatch("no closing </div> for the file block wrapper")

    session.dequeue_script(FILE_SCRIPT_HANDLE)
    return RewriteResult.rewritten(html[:position] + FILE_BLOCK_STYLE + html[position:])
