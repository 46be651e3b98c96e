# tests/dom/test_session.py
import pytest
from bs4 import BeautifulSoup

from mailedit.managers.session_manager import EditSession, ReselectPolicy
from mailedit.model import EditStatus, RenderedBox, SelectionDescriptor, SizingMode
from mailedit.services.sizing_service import detect_sizing_mode, sizing_update

TEMPLATE = (
    "<html><body><table><tr><td>"
    '<img src="hero.png" width="600" height="200">'
    "</td></tr></table>"
    "<p>Intro</p><p>Outro</p>"
    "</body></html>"
)
IMG = "/table[1]/tr[1]/td[1]/img[1]"


def _img(html):
    return BeautifulSoup(html, "html.parser").find("img")


# --- Snapshot / rollback ---

def test_cancel_restores_snapshot_verbatim():
    session = EditSession(TEMPLATE)
    session.select("/p[1]")
    session.update({"text": "Changed"})
    session.update({"tag_name": "h2"})
    assert session.is_dirty

    assert session.cancel() == TEMPLATE
    assert not session.is_open
    assert session.selection is None


def test_save_keeps_edits():
    session = EditSession(TEMPLATE)
    session.select("/p[2]")
    session.update({"text": "Bye"})
    saved = session.save()
    assert "<p>Bye</p>" in saved
    assert session.document == saved
    assert not session.is_open


def test_update_without_selection():
    session = EditSession(TEMPLATE)
    result = session.update({"text": "x"})
    assert result.status == EditStatus.RESOLUTION_FAILURE
    assert session.document == TEMPLATE


def test_select_unknown_address():
    session = EditSession(TEMPLATE)
    assert session.select("/p[9]") is None
    assert not session.is_open


def test_selection_follows_morph():
    session = EditSession(TEMPLATE)
    session.select("/p[2]")
    session.update({"tagName": "h1"})
    assert session.selection.address == "/h1[1]"
    assert session.selection.tag_name == "H1"

    session.update({"text": "Headline"})
    assert "<h1>Headline</h1>" in session.document


def test_selection_follows_anchor_wrap():
    session = EditSession(TEMPLATE)
    session.select("/p[1]")
    session.update({"href": "https://x"})
    assert session.selection.address == "/a[1]/p[1]"
    assert session.selection.href == "https://x"


# --- Reselect policies ---

def test_reselect_rejected_by_default():
    session = EditSession(TEMPLATE)
    session.select("/p[1]")
    session.update({"text": "Edited"})
    assert session.select("/p[2]") is None
    assert session.selection.address == "/p[1]"


def test_reselect_restore_rolls_back():
    session = EditSession(TEMPLATE, reselect_policy=ReselectPolicy.RESTORE)
    session.select("/p[1]")
    session.update({"text": "Edited"})
    descriptor = session.select("/p[2]")
    assert descriptor.text == "Outro"
    assert session.document == TEMPLATE


def test_reselect_abandon_keeps_working_copy():
    session = EditSession(TEMPLATE, reselect_policy="abandon")
    session.select("/p[1]")
    session.update({"text": "Edited"})
    session.select("/p[2]")
    assert "<p>Edited</p>" in session.document
    assert session.snapshot == session.document
    assert session.cancel() == session.document


# --- Fit / Fill ---

def _descriptor(**kwargs):
    base = dict(
        tag_name="IMG",
        address=IMG,
        style_height="",
        style_width="",
        computed_height="200px",
        computed_width="600px",
        object_fit="initial",
    )
    base.update(kwargs)
    return SelectionDescriptor(**base)


def test_fit_pins_unsized_dimensions():
    update = sizing_update(SizingMode.FIT, _descriptor())
    assert update.object_fit == "contain"
    assert update.height == "200px"
    assert update.width == "600px"


def test_fit_keeps_explicit_dimensions():
    update = sizing_update("fit", _descriptor(style_height="120px", style_width="auto"))
    assert update.height is None
    assert update.width == "600px"


def test_fill_lets_height_follow():
    update = sizing_update(SizingMode.FILL, _descriptor(style_width="300px"))
    assert update.object_fit == "cover"
    assert update.height == "auto"
    assert update.width is None


@pytest.mark.parametrize("kwargs, expected", [
    (dict(style_height="auto"), SizingMode.FILL),
    (dict(object_fit="cover"), SizingMode.FILL),
    (dict(style_height="200px", object_fit="cover"), SizingMode.FIT),
    (dict(object_fit="contain"), SizingMode.FIT),
])
def test_detect_sizing_mode(kwargs, expected):
    assert detect_sizing_mode(_descriptor(**kwargs)) == expected


def test_session_fit_uses_rendered_box():
    session = EditSession(TEMPLATE)
    session.select(IMG, RenderedBox(width=300, height=100))
    result = session.apply_sizing(SizingMode.FIT)
    assert result.status == EditStatus.APPLIED

    img = _img(session.document)
    assert "object-fit: contain;" in img["style"]
    assert "height: 100px;" in img["style"]
    assert img["width"] == "300"
    assert session.selection.style_height == "100px"


def test_session_fill_removes_height_attribute():
    session = EditSession(TEMPLATE)
    session.select(IMG)
    session.apply_sizing("fill")

    img = _img(session.document)
    assert img["style"] == "object-fit: cover; height: auto; width: 600px;"
    assert not img.has_attr("height")
    assert detect_sizing_mode(session.selection) == SizingMode.FILL


def test_sizing_without_selection():
    session = EditSession(TEMPLATE)
    assert session.apply_sizing(SizingMode.FIT).status == EditStatus.RESOLUTION_FAILURE


def test_fit_then_fill_on_same_selection():
    html = '<html><body><div><img src="a.png" width="300" height="200"></div></body></html>'
    session = EditSession(html)
    session.select("/div[1]/img[1]")

    session.apply_sizing(SizingMode.FIT)
    fitted = _img(session.document)
    assert fitted["style"] == "object-fit: contain; height: 200px; width: 300px;"
    assert detect_sizing_mode(session.selection) == SizingMode.FIT

    result = session.apply_sizing(SizingMode.FILL)
    assert result.status == EditStatus.APPLIED
    filled = _img(session.document)
    assert filled["style"] == "object-fit: cover; height: auto; width: 300px;"
    assert filled["width"] == "300"
    assert not filled.has_attr("height")
    assert detect_sizing_mode(session.selection) == SizingMode.FILL


# --- Payload validation & ignored fields ---

def test_invalid_payload_is_a_parse_failure():
    session = EditSession(TEMPLATE)
    session.select("/p[1]")
    result = session.update({"bogus": 1})
    assert result.status == EditStatus.PARSE_FAILURE
    assert session.document == TEMPLATE
    assert session.selection.text == "Intro"


def test_ignored_fields_do_not_reach_selection():
    session = EditSession(TEMPLATE)
    session.select("/p[1]")
    result = session.update({"src": "x.png", "tag_name": "<bad>", "text": "Hi"})
    assert set(result.ignored_fields) == {"src", "tag_name"}
    assert session.selection.src is None
    assert session.selection.tag_name == "P"
    assert session.selection.text == "Hi"
