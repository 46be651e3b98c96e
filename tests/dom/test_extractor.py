# tests/dom/test_extractor.py
import pytest
from bs4 import BeautifulSoup

from mailedit.dom.engine import MutationEngine
from mailedit.dom.extractor import parse_scale, rendered_text
from mailedit.model import RenderedBox

TEMPLATE = """<html><body>
<table><tr><td>
  <a href="https://shop.example/sale"><img src="banner.png" alt="Sale" width="600" height="200"></a>
</td></tr></table>
<p>  Hello
     <b>there</b>  <!-- note -->
</p>
<img src="plain.png" style="height: 150px; object-fit: cover; transform: scale(1.5)">
</body></html>"""


@pytest.fixture
def engine():
    return MutationEngine()


@pytest.mark.parametrize("value, expected", [
    (None, 1.0),
    ("", 1.0),
    ("none", 1.0),
    ("scale(2)", 2.0),
    ("scale(1.25)", 1.25),
    ("scaleX(0.5)", 0.5),
    ("matrix(1.5, 0, 0, 1.5, 0, 0)", 1.5),
    ("rotate(10deg)", 1.0),
])
def test_parse_scale(value, expected):
    assert parse_scale(value) == expected


def test_rendered_text_collapses_whitespace_and_skips_comments():
    soup = BeautifulSoup(TEMPLATE, "html.parser")
    assert rendered_text(soup.find("p")) == "Hello there"


def test_rendered_text_ignores_style_blocks():
    soup = BeautifulSoup("<div><style>p { color: red }</style>Visible</div>", "html.parser")
    assert rendered_text(soup.div) == "Visible"


def test_image_defaults_and_dimensions_from_attributes(engine):
    descriptor = engine.extract(TEMPLATE, "/table[1]/tr[1]/td[1]/a[1]/img[1]")
    assert descriptor.is_image
    assert descriptor.tag_name == "IMG"
    assert descriptor.src == "banner.png"
    assert descriptor.alt == "Sale"
    assert descriptor.object_fit == "initial"
    assert descriptor.object_position == "50% 50%"
    assert descriptor.transform_origin == "50% 50%"
    assert descriptor.scale == 1.0
    assert descriptor.style_height == ""
    assert descriptor.computed_height == "200px"
    assert descriptor.computed_width == "600px"


def test_href_comes_from_enclosing_anchor(engine):
    descriptor = engine.extract(TEMPLATE, "/table[1]/tr[1]/td[1]/a[1]/img[1]")
    assert descriptor.href == "https://shop.example/sale"


def test_image_state_from_inline_style(engine):
    descriptor = engine.extract(TEMPLATE, "/img[1]")
    assert descriptor.style_height == "150px"
    assert descriptor.computed_height == "150px"
    assert descriptor.computed_width is None
    assert descriptor.object_fit == "cover"
    assert descriptor.scale == 1.5
    assert descriptor.href is None


def test_rendered_box_overrides_markup(engine):
    descriptor = engine.extract(
        TEMPLATE, "/table[1]/tr[1]/td[1]/a[1]/img[1]", RenderedBox(width=320, height=107.5)
    )
    assert descriptor.computed_width == "320px"
    assert descriptor.computed_height == "107.5px"


def test_text_element_has_no_image_fields(engine):
    descriptor = engine.extract(TEMPLATE, "/p[1]")
    assert not descriptor.is_image
    assert descriptor.text == "Hello there"
    assert descriptor.src is None
    assert descriptor.scale is None


def test_extract_unknown_address(engine):
    assert engine.extract(TEMPLATE, "/p[3]") is None
    assert engine.extract(TEMPLATE, "not an address") is None
