# amp_blocks/rules/categories.py
"""
Categories block rendered as a dropdown.

Core renders a ``<select name="cat">`` followed by a script that navigates on
change. AMP disallows the script, so the select is placed in a GET form
pointed at the home URL and submits it through an ``on="change:…"`` action.
"""

import logging

from .result import RewriteResult
from .utils import add_amp_action, parse_fragment, serialize

logger = logging.getLogger(__name__)


def categories_form_id(number: int) -> str:
    return f"wp-block-categories-dropdown-{number}-form"


def bind_select_to_form(select, form_id: str) -> None:
    """Submit ``form_id`` whenever the select value changes."""
    add_amp_action(select, "change", f"{form_id}.submit")


def ampify_categories_block(html, attrs, session):
    """
    Replace the categories dropdown script with a form submit action.

    Args:
        html: Rendered block markup
        attrs: Block attributes (unused)
        session: Current RenderSession; supplies the form counter and home URL

    Returns:
        RewriteResult with the script removed and the select inside an
        identified form
    """
    soup = parse_fragment(html)

    select = soup.find("select", attrs={"name": "cat"})
    if select is None:
        return RewriteResult.unchanged("no categories dropdown")

    scripts = soup.find_all("script")
    if not scripts:
        return RewriteResult.unchanged("no dropdown change handler")

    form_id = categories_form_id(session.next_category_id())

    for script in scripts:
        script.decompose()

    form = select.find_parent("form")
    if form is None:
        form = soup.new_tag(
            "form",
            attrs={"action": session.home_url, "method": "get", "target": "_top"},
        )
        select.wrap(form)
    form["id"] = form_id

    bind_select_to_form(select, form_id)

    logger.debug(f"Bound categories dropdown to form {form_id}")
    return RewriteResult.rewritten(serialize(soup))
