import pytest

from autofill_engine.core.dom import FrameAccessError, LiveDocument  # type: ignore[import]


def _doc(html: str) -> LiveDocument:
    return LiveDocument.from_html(html, url="https://example.com")


def test_values_follow_form_control_semantics():
    document = _doc(
        """
        <input id="a" value="x">
        <input id="b" type="checkbox">
        <textarea id="c">notes</textarea>
        <select id="d"><option value="1">One</option><option value="2" selected>Two</option></select>
        <div id="e" contenteditable="true">Hi <b>there</b><script>alert(1)</script></div>
        """
    )

    assert document.value_of(document.get_element_by_id("a")) == "x"
    assert document.value_of(document.get_element_by_id("b")) == "on"
    assert document.value_of(document.get_element_by_id("c")) == "notes"
    assert document.value_of(document.get_element_by_id("d")) == "2"
    assert document.value_of(document.get_element_by_id("e")) == "Hi there"


def test_select_defaults_to_first_option():
    document = _doc('<select id="s"><option value="a">A</option><option>B</option></select>')
    select = document.get_element_by_id("s")

    assert document.selected_index(select) == 0
    document.select_index(select, 1)
    assert document.selected_index(select) == 1
    assert document.value_of(select) == "B"


def test_checking_a_radio_unchecks_its_group():
    document = _doc(
        """
        <form>
          <input type="radio" name="size" id="s" value="s" checked>
          <input type="radio" name="size" id="m" value="m">
        </form>
        """
    )
    small = document.get_element_by_id("s")
    medium = document.get_element_by_id("m")

    document.set_checked(medium, True)

    assert document.is_checked(medium)
    assert not document.is_checked(small)


def test_events_bubble_to_ancestors_and_are_recorded():
    document = _doc('<form id="f"><input id="i"></form>')
    form = document.get_element_by_id("f")
    field = document.get_element_by_id("i")
    seen = []
    document.add_event_listener(form, "change", lambda event: seen.append(event.target))

    document.dispatch_event(field, "change")

    assert seen == [field]
    assert document.events_for(field) == ["change"]


def test_identical_markup_does_not_share_listeners():
    document = _doc('<input name="q"><input name="q">')
    first, second = document.select("input")
    calls = []
    document.add_event_listener(first, "input", lambda event: calls.append("first"))

    document.dispatch_event(second, "input")

    assert calls == []


def test_restricted_frame_raises_and_attached_frame_is_readable():
    document = _doc('<iframe id="open"></iframe><iframe id="closed"></iframe>')
    opened = document.get_element_by_id("open")
    closed = document.get_element_by_id("closed")
    document.attach_frame(opened, _doc("<html><body><p>Body text</p></body></html>"))
    document.restrict_frame(closed)

    assert document.value_of(opened) == "Body text"
    with pytest.raises(FrameAccessError):
        document.frame_document(closed)
