# amp_blocks/templatetags/amp_tags.py

from django import template
from django.utils.safestring import mark_safe

from amp_blocks.context import RenderSession
from amp_blocks.transformer import transform
from amp_blocks.widgets import preserve_widget_text_element_dimensions

register = template.Library()

_SESSION_KEY = "amp_blocks_render_session"


def get_render_session(context):
    """Return the RenderSession of the template render in progress, creating it on first use."""
    session = context.render_context.get(_SESSION_KEY)
    if session is None:
        session = RenderSession.from_config()
        context.render_context[_SESSION_KEY] = session
    return session


@register.simple_tag(takes_context=True)
def ampify_block(context, value, block):
    """Ampify one rendered block; ids stay unique across the template render."""
    return mark_safe(transform(str(value), block, get_render_session(context)))


@register.filter(name="preserve_dimensions")
def preserve_dimensions_filter(value):
    return mark_safe(preserve_widget_text_element_dimensions(str(value)))
