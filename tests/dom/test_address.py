# tests/dom/test_address.py
import pytest
from bs4 import BeautifulSoup

from mailedit.dom.address import AddressCodec
from mailedit.dom.engine import MutationEngine
from mailedit.dom.resolver import NodeResolver
from mailedit.model import Address, AddressStep, EditStatus

TEMPLATE = """<!DOCTYPE html>
<html>
<body>
  <table>
    <tr>
      <td><img src="logo.png" alt="Logo"></td>
    </tr>
    <tr>
      <td>
        <h1>Welcome</h1>
        <p>First</p>
        <p>Second</p>
        <a href="#" id="cta">Get Started</a>
      </td>
    </tr>
  </table>
</body>
</html>"""


@pytest.fixture
def soup():
    return BeautifulSoup(TEMPLATE, "html.parser")


@pytest.fixture
def codec():
    return AddressCodec()


# --- Address value type ---

def test_parse_and_render_path():
    address = Address.parse("/table[1]/tr[2]/td[1]/p[2]")
    assert address.steps[-1] == AddressStep(tag="p", ordinal=2)
    assert str(address) == "/table[1]/tr[2]/td[1]/p[2]"


def test_parse_identifier():
    address = Address.parse('//*[@id="cta"]')
    assert address.is_identifier
    assert address.identifier == "cta"
    assert str(address) == '//*[@id="cta"]'


def test_parse_empty_is_root():
    assert Address.parse("").is_root
    assert str(Address()) == ""


@pytest.mark.parametrize("text", ["table[1]", "/table[1]x", "/table", "/p[0]", "//div"])
def test_parse_malformed(text):
    with pytest.raises(ValueError):
        Address.parse(text)


def test_tag_names_are_lowercased():
    assert str(Address.parse("/TABLE[1]/TR[1]")) == "/table[1]/tr[1]"


def test_with_wrapper_inserts_before_last_step():
    address = Address.parse("/table[1]/tr[1]/td[1]/span[1]")
    assert str(address.with_wrapper("a")) == "/table[1]/tr[1]/td[1]/a[1]/span[1]"


# --- Encoding ---

def test_encode_counts_only_same_tag_siblings(soup, codec):
    second_p = soup.find_all("p")[1]
    assert str(codec.encode(second_p)) == "/table[1]/tr[2]/td[1]/p[2]"


def test_encode_image_in_first_row(soup, codec):
    assert str(codec.encode(soup.find("img"), soup.body)) == "/table[1]/tr[1]/td[1]/img[1]"


def test_encode_prefers_identifier(soup, codec):
    assert str(codec.encode(soup.find("a"))) == '//*[@id="cta"]'


def test_encode_root_is_empty(soup, codec):
    assert codec.encode(soup.body, soup.body).is_root


def test_encode_fragment_without_body(codec):
    fragment = BeautifulSoup("<div><span>a</span><span>b</span></div>", "html.parser")
    assert str(codec.encode(fragment.find_all("span")[1])) == "/div[1]/span[2]"


def test_custom_identifier_attribute():
    codec = AddressCodec(id_attribute="data-edit-id")
    soup = BeautifulSoup('<body><p data-edit-id="intro">x</p></body>', "html.parser")
    node = soup.find("p")
    address = codec.encode(node)
    assert str(address) == '//*[@id="intro"]'
    assert codec.resolve(address, soup) is node


# --- Ordinal uniqueness & round trip ---

def test_every_element_gets_a_distinct_address(soup, codec):
    entries = list(codec.iter_addresses(soup))
    assert len(entries) == len(soup.body.find_all(True))
    rendered = [str(address) for address, _ in entries]
    assert len(set(rendered)) == len(rendered)


def test_every_address_resolves_to_its_element(soup, codec):
    for address, tag in codec.iter_addresses(soup):
        assert codec.resolve(address, soup) is tag


def test_resolve_missing_step(soup, codec):
    assert codec.resolve(Address.parse("/table[1]/tr[3]"), soup) is None
    assert codec.resolve(Address.parse('//*[@id="nope"]'), soup) is None


# --- Resolver ---

def test_resolver_direct_hit(soup):
    resolution = NodeResolver().resolve(Address.parse("/table[1]/tr[2]/td[1]/h1[1]"), soup)
    assert resolution.found
    assert not resolution.recovered
    assert resolution.node.get_text() == "Welcome"


def test_resolver_recovers_through_anchor_wrapper():
    soup = BeautifulSoup(
        '<body><div><a href="https://x"><span>Click</span></a></div></body>', "html.parser"
    )
    resolution = NodeResolver().resolve(Address.parse("/div[1]/span[1]"), soup)
    assert resolution.recovered
    assert resolution.node.get_text() == "Click"


def test_resolver_gives_up_after_one_retry():
    soup = BeautifulSoup("<body><div><b><span>Click</span></b></div></body>", "html.parser")
    resolution = NodeResolver().resolve(Address.parse("/div[1]/span[1]"), soup)
    assert not resolution.found
    assert not resolution.recovered


def test_resolver_never_retries_identifiers(soup):
    assert not NodeResolver().resolve(Address(identifier="missing"), soup).found


def test_resolver_rejects_document_object():
    fragment = BeautifulSoup("<p>x</p>", "html.parser")
    assert not NodeResolver().resolve(Address(), fragment).found


# --- Namespaced tags & quoted ids ---

OUTLOOK_TEMPLATE = """<html><body>
<p class="MsoNormal">Dear reader<o:p></o:p></p>
<p class="MsoNormal"><span>Regards</span><o:p>&nbsp;</o:p></p>
</body></html>"""


def test_namespaced_tags_round_trip(codec):
    soup = BeautifulSoup(OUTLOOK_TEMPLATE, "html.parser")
    for address, tag in codec.iter_addresses(soup):
        parsed = Address.parse(str(address))
        assert codec.resolve(parsed, soup) is tag
    assert str(codec.encode(soup.find_all("o:p")[1])) == "/p[2]/o:p[1]"


def test_namespaced_tag_is_editable():
    result = MutationEngine().apply(OUTLOOK_TEMPLATE, "/p[2]/o:p[1]", {"text": "Thanks"})
    assert result.status == EditStatus.APPLIED
    assert "<o:p>Thanks</o:p>" in result.html


@pytest.mark.parametrize("identifier, rendered", [
    ('say"hi', """//*[@id='say"hi']"""),
    ("it's", '''//*[@id="it's"]'''),
])
def test_identifier_with_quotes_round_trips(codec, identifier, rendered):
    soup = BeautifulSoup("<body><p>x</p></body>", "html.parser")
    node = soup.find("p")
    node["id"] = identifier
    address = codec.encode(node)
    assert str(address) == rendered
    assert Address.parse(rendered).identifier == identifier
    assert codec.resolve(Address.parse(rendered), soup) is node


def test_identifier_with_both_quotes_falls_back_to_path(codec):
    soup = BeautifulSoup("<body><div><p>x</p></div></body>", "html.parser")
    node = soup.find("p")
    node["id"] = """a"b'c"""
    assert str(codec.encode(node)) == "/div[1]/p[1]"
