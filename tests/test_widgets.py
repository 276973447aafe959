import re

import pytest
from bs4 import BeautifulSoup

from amp_blocks import BlockDescriptor, transform
from amp_blocks.context import RenderSession
from amp_blocks.widgets import (
    preserve_widget_text_element_dimensions,
    restore_preserved_dimensions,
    sanitize_raw_embeds,
    sanitize_widgets_html,
)

MEDIA_SAMPLES = [
    "<p>No media at all.</p>",
    '<video src="a.mp4" width="640" height="360"></video>',
    '<p>Intro</p><iframe src="https://example.com/embed" width="560" height="315" frameborder="0"></iframe>',
    '<object data="a.swf" width="400"></object><embed src="b.swf" height="200">',
    '<video src="a.mp4"></video><iframe width="100" height="50" src="x"></iframe><video height="90" width="160"></video>',
]


def _strip_dimensions(html):
    """What the host does to Text widget media before the widget is printed."""
    return re.sub(r'\s(?:width|height)="\d+"', "", html)


def _dimensions(html):
    soup = BeautifulSoup(html, "html.parser")
    return [
        (element.name, element.get("width"), element.get("height"))
        for element in soup.find_all(["video", "iframe", "object", "embed"])
    ]


def test_prepass_adds_shadow_attributes():
    html = '<iframe src="x" width="560" height="315"></iframe>'
    assert preserve_widget_text_element_dimensions(html) == (
        '<iframe src="x" data-preserved-width="560" width="560" '
        'data-preserved-height="315" height="315"></iframe>'
    )


def test_prepass_ignores_other_elements():
    html = '<img src="a.jpg" width="10" height="20"><div width="5"></div>'
    assert preserve_widget_text_element_dimensions(html) == html


def test_prepass_matches_tags_case_insensitively():
    output = preserve_widget_text_element_dimensions('<VIDEO src="a.mp4" width="1"></VIDEO>')
    assert 'data-preserved-width="1" width="1"' in output


@pytest.mark.parametrize("html", MEDIA_SAMPLES)
def test_prepass_is_idempotent(html):
    once = preserve_widget_text_element_dimensions(html)
    assert preserve_widget_text_element_dimensions(once) == once


def test_prepass_leaves_empty_content_alone():
    assert preserve_widget_text_element_dimensions("") == ""


@pytest.mark.parametrize("html", MEDIA_SAMPLES)
def test_round_trip_restores_dimensions(html):
    stripped = _strip_dimensions(preserve_widget_text_element_dimensions(html))
    restored = restore_preserved_dimensions(stripped)
    assert _dimensions(restored) == _dimensions(html)
    assert "data-preserved-" not in restored


def test_postpass_removes_shadow_when_real_attribute_survived():
    html = '<video data-preserved-width="640" width="320"></video>'
    assert restore_preserved_dimensions(html) == '<video width="640"></video>'


def test_text_widget_restores_dimensions_and_drops_video_style():
    html = (
        '<div class="textwidget">'
        '<div style="width: 640px;" class="wp-video">'
        '<video class="wp-video-shortcode" data-preserved-width="640" data-preserved-height="360" src="a.mp4"></video>'
        "</div></div>"
        '<div class="sidebar"><iframe data-preserved-width="10" src="y"></iframe></div>'
    )
    soup = BeautifulSoup(html, "html.parser")
    sanitize_raw_embeds(soup, RenderSession())

    video = soup.find("video")
    assert video["width"] == "640"
    assert video["height"] == "360"
    assert not video.has_attr("data-preserved-width")
    assert not soup.find("div", class_="wp-video").has_attr("style")
    # Outside of Text widgets nothing is restored.
    assert soup.find("iframe")["data-preserved-width"] == "10"


def test_categories_widget_uses_form_submit():
    html = (
        '<section class="widget widget_categories">'
        '<form action="https://example.com" method="get">'
        '<label class="screen-reader-text" for="cat">Categories</label>'
        '<select name="cat" id="cat" class="postform"><option value="-1">Select Category</option></select>'
        "</form>"
        '<script type="text/javascript">(function() { var dropdown = document.getElementById( "cat" );'
        " function onCatChange() { dropdown.parentNode.submit(); } dropdown.onchange = onCatChange; })();</script>"
        "</section>"
    )
    session = RenderSession()
    soup = BeautifulSoup(sanitize_widgets_html(html, session), "html.parser")

    assert soup.find("script") is None
    assert soup.find("form")["id"] == "amp-wp-widget-categories-1"
    assert soup.find("select")["on"] == "change:amp-wp-widget-categories-1.submit"
    assert session.category_widget_count == 1


def test_categories_widget_counter_is_shared_with_blocks():
    session = RenderSession()
    transform(
        '<select name="cat"></select><script>onCatChange</script>',
        BlockDescriptor("core/categories"),
        session,
    )
    html = '<section><form><select name="cat"></select></form><script>onCatChange()</script></section>'
    output = sanitize_widgets_html(html, session)
    assert 'id="amp-wp-widget-categories-2"' in output


def test_categories_select_outside_form_is_skipped():
    html = '<section><select name="cat"></select><script>onCatChange()</script></section>'
    session = RenderSession()
    output = sanitize_widgets_html(html, session)
    assert "<script>" in output
    assert session.category_widget_count == 0


def test_archives_widget_script_is_replaced():
    html = (
        '<section class="widget widget_archive">'
        '<select id="archives-dropdown-2" name="archive-dropdown">'
        '<option value="">Select Month</option>'
        '<option value="https://example.com/2021/05/">May 2021</option>'
        "</select>"
        "<script>(function() { function onSelectChange() {} })();</script>"
        "</section>"
    )
    session = RenderSession(amp_to_amp_linking_enabled=True)
    soup = BeautifulSoup(sanitize_widgets_html(html, session), "html.parser")

    assert soup.find("script") is None
    select = soup.find("select")
    assert select["on"] == "change:AMP.navigateTo(url=event.value)"
    assert select["id"] == "archives-dropdown-2"
    assert [option["value"] for option in select.find_all("option")] == [
        "",
        "https://example.com/2021/05/?amp=1",
    ]


def test_legacy_archives_widget_onchange_is_replaced():
    html = (
        '<select id="archives-dropdown-3" name="archive-dropdown" '
        "onchange='document.location.href=this.options[this.selectedIndex].value;'>"
        '<option value="/2021/05/">May 2021</option></select>'
    )
    soup = BeautifulSoup(sanitize_widgets_html(html, RenderSession()), "html.parser")
    select = soup.find("select")
    assert not select.has_attr("onchange")
    assert select["on"] == "change:AMP.navigateTo(url=event.value)"
    assert select.find("option")["value"] == "/2021/05/"


def test_archives_widget_without_handler_is_untouched():
    html = '<select id="archives-dropdown-4" name="archive-dropdown"><option value="/a/">A</option></select>'
    assert sanitize_widgets_html(html, RenderSession()) == html
