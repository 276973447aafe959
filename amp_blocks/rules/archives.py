# amp_blocks/rules/archives.py
"""
Archives block rendered as a dropdown.

The change handler (an inline ``onchange`` on older cores, an
``onSelectChange`` script on newer ones) becomes an ``AMP.navigateTo``
action. Core derives the select id from ``uniqid()``, so the id is
renumbered from the render session to keep output deterministic.
"""

import logging

from .result import RewriteResult
from .utils import add_amp_action, find_script_containing, parse_fragment, serialize

logger = logging.getLogger(__name__)

NAVIGATE_ACTION = "AMP.navigateTo(url=event.value)"

ID_PREFIXES = ("wp-block-archives-", "archives-dropdown-")


def remove_change_handler(select, scope) -> bool:
    """
    Remove the JavaScript change handler of an archives select.

    The ``onSelectChange`` script is looked up under ``scope``; the inline
    ``onchange`` attribute is the fallback. Returns False when neither exists.
    Blocks are bound either way; widgets without a handler are left alone.
    """
    script = find_script_containing(scope, "onSelectChange") if scope is not None else None
    if script is not None:
        script.decompose()
        return True
    if select.has_attr("onchange"):
        del select["onchange"]
        return True
    return False


def bind_archives_select(select, session) -> None:
    """Navigate on change, optionally through the paired AMP URLs."""
    add_amp_action(select, "change", NAVIGATE_ACTION)

    if session.amp_to_amp_linking_enabled:
        for option in select.find_all("option"):
            value = option.get("value", "")
            if value:
                option["value"] = session.paired_url(value)


def renumber_select_id(soup, select, number: int):
    """Replace the select id suffix with ``number``; labels follow. Returns the new id."""
    old_id = select.get("id", "")
    for prefix in ID_PREFIXES:
        if old_id.startswith(prefix):
            new_id = f"{prefix}{number}"
            break
    else:
        return None

    select["id"] = new_id
    for label in soup.find_all("label", attrs={"for": old_id}):
        label["for"] = new_id
    return new_id


def ampify_archives_block(html, attrs, session):
    soup = parse_fragment(html)

    select = soup.find("select", attrs={"name": "archive-dropdown"})
    if select is None:
        return RewriteResult.unchanged("no archives dropdown")

    if not remove_change_handler(select, soup):
        logger.debug("Archives dropdown has no change handler to remove")

    new_id = renumber_select_id(soup, select, session.next_archives_id())
    bind_archives_select(select, session)

    logger.debug(f"Bound archives dropdown {new_id or '(no id)'} to AMP.navigateTo")
    return RewriteResult.rewritten(serialize(soup))
