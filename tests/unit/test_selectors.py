from autofill_engine.core.config import AutofillConfig  # type: ignore[import]
from autofill_engine.identify.selectors import (  # type: ignore[import]
    escape_attribute_value,
    is_selector_unique,
    selector_identifier,
    xpath_identifier,
)

from tests.helpers.autofill_imports import build_document


def test_id_is_preferred_and_shared_name_is_never_used():
    document = build_document(
        '<html><body><form><input name="email"><input name="email" id="primary-email"></form></body></html>'
    )
    plain, primary = document.select("input")

    assert selector_identifier(document, primary) == "#primary-email"

    fallback = selector_identifier(document, plain)
    assert fallback != '[name="email"]'
    if fallback.startswith("/"):
        assert fallback == "/html/body/form/input"
    else:
        assert document.select(fallback) == [plain]


def test_first_unique_attribute_wins():
    document = build_document(
        '<html><body><input type="email" data-role="contact"><input type="email" data-role="billing"></body></html>'
    )
    contact, billing = document.select("input")

    assert selector_identifier(document, contact) == '[data-role="contact"]'
    assert selector_identifier(document, billing) == '[data-role="billing"]'


def test_id_is_skipped_on_problematic_sites():
    document = build_document(
        '<html><body><input id="q1" role="textbox"></body></html>',
        url="https://www.crowdtap.com/survey/1",
    )
    (element,) = document.select("input")

    assert selector_identifier(document, element) == '[role="textbox"]'


def test_problematic_sites_are_configurable():
    document = build_document('<html><body><input id="q1"></body></html>', url="https://forms.example.org")
    (element,) = document.select("input")
    config = AutofillConfig(problematic_sites=("example.org",))

    assert selector_identifier(document, element, config) == "/html/body/input"


def test_ids_are_css_escaped():
    document = build_document('<html><body><input id="1st"></body></html>')
    (element,) = document.select("input")

    selector = selector_identifier(document, element)

    assert selector != "#1st"
    assert document.select(selector) == [element]


def test_attribute_values_are_escaped():
    assert escape_attribute_value('say "hi"\\\nnow') == 'say \\"hi\\"\\\\ now'

    document = build_document('<html><body><input placeholder=\'He said "yes"\'></body></html>')
    (element,) = document.select("input")

    assert selector_identifier(document, element) == '[placeholder="He said \\"yes\\""]'


def test_invalid_selector_is_not_unique():
    document = build_document("<html><body><input></body></html>")
    (element,) = document.select("input")

    assert is_selector_unique(document, "input[", element) is False


def test_xpath_counts_only_preceding_same_tag_siblings():
    document = build_document(
        "<html><body><div></div><p></p><div><span></span><input><input></div></body></html>"
    )
    second_input = document.select("input")[1]
    paragraph = document.select("p")[0]

    assert xpath_identifier(second_input) == "/html/body/div[2]/input[2]"
    assert xpath_identifier(paragraph) == "/html/body/p"
