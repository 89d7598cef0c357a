import pytest

from autofill_engine.core.config import AutofillConfig  # type: ignore[import]
from autofill_engine.fill.executor import FillExecutor, compose_text, parse_number  # type: ignore[import]

from tests.helpers.autofill_imports import (
    FillMode,
    Rule,
    build_document,
    build_executor,
    field_by_name,
    identify,
    make_rule,
    run,
)


def _page(body: str):
    return build_document(f"<html><body><form>{body}</form></body></html>")


@pytest.mark.parametrize(
    ("mode", "current", "expected"),
    [
        (FillMode.REPLACE, "old", "new"),
        (FillMode.APPEND, "old", "oldnew"),
        (FillMode.PREPEND, "old", "newold"),
        (FillMode.SURROUND, "old", "newoldnew"),
        (FillMode.INCREMENT, "5", "6"),
        (FillMode.DECREMENT, "5", "4"),
        (FillMode.INCREMENT, "1.5", "2.5"),
        (FillMode.INCREMENT, "abc", "abc"),
        (FillMode.DECREMENT, "", ""),
    ],
)
def test_compose_text(mode, current, expected):
    assert compose_text(current, "new", mode) == expected


def test_parse_number_rejects_non_numeric_text():
    assert parse_number(" 42 ") == 42.0
    assert parse_number("nan") is None
    assert parse_number("1e3") == 1000.0
    assert parse_number("12abc") is None


def test_replace_fill_writes_value_and_emits_text_events():
    document = _page('<input name="email">')
    field = field_by_name(document, "email")

    filled = run(build_executor().fill(field, make_rule()))

    assert filled is True
    assert document.value_of(field.element) == "user@example.com"
    assert document.events_for(field.element) == ["focus", "input", "keyup", "change", "blur"]


def test_replace_fill_is_idempotent():
    document = _page('<input name="email">')
    field = field_by_name(document, "email")
    executor = build_executor()
    rule = make_rule()

    run(executor.fill(field, rule))
    first = document.value_of(field.element)
    run(executor.fill(field, rule))

    assert document.value_of(field.element) == first == "user@example.com"


def test_existing_value_is_kept_outside_replace_mode():
    document = _page('<input name="email" value="keep@example.com">')
    field = field_by_name(document, "email")
    rule = make_rule(fill_mode=FillMode.APPEND, overwrite=False)

    filled = run(build_executor().fill(field, rule))

    assert filled is False
    assert document.value_of(field.element) == "keep@example.com"
    assert document.events_for(field.element) == []


def test_force_overwrite_bypasses_the_guard():
    document = _page('<input name="email" value="a">')
    field = field_by_name(document, "email")
    rule = make_rule(value="b", fill_mode=FillMode.APPEND, overwrite=False)

    assert run(build_executor().fill(field, rule, force_overwrite=True)) is True
    assert document.value_of(field.element) == "ab"


def test_increment_and_non_numeric_values():
    document = _page('<input name="qty" value="5"><input name="code" value="abc">')
    qty = field_by_name(document, "qty")
    code = field_by_name(document, "code")
    rule = make_rule(pattern="x", value="", fill_mode=FillMode.INCREMENT, overwrite=True)

    assert run(build_executor().fill(qty, rule)) is True
    assert run(build_executor().fill(code, rule)) is True
    assert document.value_of(qty.element) == "6"
    assert document.value_of(code.element) == "abc"


def test_template_variables_reach_the_widget():
    document = _page('<textarea name="company"></textarea>')
    field = field_by_name(document, "company")
    executor = build_executor(variables={"company": "Acme"})

    run(executor.fill(field, make_rule(value="{company} Ltd")))

    assert document.value_of(field.element) == "Acme Ltd"


def test_select_by_text_value_and_index():
    document = _page(
        '<select name="country">'
        '<option value="">Choose</option>'
        '<option value="us">United States</option>'
        '<option value="br">Brazil</option>'
        "</select>"
    )
    field = field_by_name(document, "country")
    executor = build_executor()

    assert run(executor.fill(field, make_rule(value='"Brazil"'))) is True
    assert document.value_of(field.element) == "br"

    run(executor.fill(field, make_rule(value="US")))
    assert document.value_of(field.element) == "us"

    run(executor.fill(field, make_rule(value="0")))
    assert document.value_of(field.element) == ""

    assert document.events_for(field.element) == ["change", "change", "change"]


def test_select_without_match_keeps_selection_but_reports_attempt():
    document = _page('<select name="s"><option value="a">A</option><option value="b" selected>B</option></select>')
    field = field_by_name(document, "s")

    assert run(build_executor().fill(field, make_rule(value="zzz"))) is True
    assert run(build_executor().fill(field, make_rule(value="9"))) is True
    assert document.value_of(field.element) == "b"


def test_select_random_option():
    document = _page('<select name="s"><option>A</option><option>B</option><option>C</option></select>')
    field = field_by_name(document, "s")

    run(build_executor(seed=11).fill(field, make_rule(value="?")))

    assert document.value_of(field.element) in {"A", "B", "C"}


def test_checkbox_tokens_and_idempotence():
    document = _page('<input type="checkbox" name="terms">')
    field = field_by_name(document, "terms")
    executor = build_executor()

    assert run(executor.fill(field, make_rule(value="true"))) is True
    assert document.is_checked(field.element)
    assert document.events_for(field.element) == ["change"]

    assert run(executor.fill(field, make_rule(value="on"))) is False
    assert document.events_for(field.element) == ["change"]

    assert run(executor.fill(field, make_rule(value="0"))) is True
    assert not document.is_checked(field.element)


def test_radio_matches_by_value_or_label():
    document = _page(
        '<label><input type="radio" name="plan" value="basic"> Basic</label>'
        '<label><input type="radio" name="plan" value="pro"> Professional</label>'
    )
    basic, pro = document.select("input")
    fields = {field.element.get("value"): field for field in identify(document)}

    assert run(build_executor().fill(fields["pro"], make_rule(value="professional"))) is True
    assert document.is_checked(pro)
    assert not document.is_checked(basic)

    assert run(build_executor().fill(fields["basic"], make_rule(value="BASIC"))) is True
    assert document.is_checked(basic)
    assert not document.is_checked(pro)


def test_listener_failure_propagates_to_the_caller():
    document = _page('<input name="email">')
    field = field_by_name(document, "email")

    def explode(event):
        raise RuntimeError("listener exploded")

    document.add_event_listener(field.element, "input", explode)

    with pytest.raises(RuntimeError, match="listener exploded"):
        run(build_executor().fill(field, make_rule()))


def test_each_event_is_followed_by_a_suspension():
    document = _page('<input name="email">')
    field = field_by_name(document, "email")
    delays = []

    async def record(delay):
        delays.append(delay)

    executor = FillExecutor(AutofillConfig(event_delay=0.005), sleep=record)
    run(executor.fill(field, make_rule()))

    assert delays == [0.005] * 5


def test_rule_defaults_keep_existing_input_outside_replace_mode():
    document = _page('<input name="note" value="keep">')
    field = field_by_name(document, "note")
    rule = Rule(rule_id="r", pattern="note", value_template="x", fill_mode=FillMode.APPEND)

    assert rule.overwrite is False
    assert run(build_executor().fill(field, rule)) is False
    assert document.value_of(field.element) == "keep"
    assert document.events_for(field.element) == []
