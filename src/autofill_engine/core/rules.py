"""Loading of the rule store handed over by the host application."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from urllib.parse import urlparse

from .models import FillMode, Rule

logger = logging.getLogger(__name__)

FIELD_RULE_TYPE = 0
TRUTHY = {"1", "true", "yes", "on"}

# Sample profile shipped with the extension: autocomplete tokens mapped to
# placeholder values, all in category ``c1``.
DEFAULT_STORE: Dict[str, Any] = {
    "cats": [{"k": "c1", "n": "Sample address", "s": "greenido.github.io"}],
    "rules": {
        "r1": {"t": 0, "n": "/^(cc-)?name$/", "v": "Full name", "s": "", "o": 1, "c": "c1"},
        "r2": {"t": 0, "n": '"honorific-prefix"', "v": "Prefix/Title", "s": "", "o": 1, "c": "c1"},
        "r3": {"t": 0, "n": "/^(cc-)?given-name$/", "v": "First name", "s": "", "o": 1, "c": "c1"},
        "r4": {"t": 0, "n": "/^(cc-)?additional-name$/", "v": "Middle name", "s": "", "o": 1, "c": "c1"},
        "r5": {"t": 0, "n": "/^(cc-)?family-name$/", "v": "Last name", "s": "", "o": 1, "c": "c1"},
        "r6": {"t": 0, "n": '"honorific-suffix"', "v": "Suffix", "s": "", "o": 1, "c": "c1"},
        "r7": {
            "t": 0,
            "n": "street-address",
            "v": "Street address - line 1, Street address - line 2, Street address - line 3",
            "s": "",
            "o": 1,
            "c": "c1",
        },
        "r8": {"t": 0, "n": "address-line1", "v": "Street address - line 1", "s": "", "o": 1, "c": "c1"},
        "r9": {"t": 0, "n": "address-line2", "v": "Street address - line 2", "s": "", "o": 1, "c": "c1"},
        "r10": {"t": 0, "n": "address-line3", "v": "Street address - line 3", "s": "", "o": 1, "c": "c1"},
        "r11": {"t": 0, "n": "address-level2", "v": "City/Town/Village", "s": "", "o": 1, "c": "c1"},
        "r12": {"t": 0, "n": "address-level1", "v": "State/Province", "s": "", "o": 1, "c": "c1"},
        "r13": {"t": 0, "n": "postal-code", "v": "Postal/Zip code", "s": "", "o": 1, "c": "c1"},
        "r14": {"t": 0, "n": '"country"', "v": "Country code", "s": "", "o": 1, "c": "c1"},
        "r15": {"t": 0, "n": '"country-name"', "v": "Country name", "s": "", "o": 1, "c": "c1"},
        "r16": {"t": 0, "n": '"organization-title"', "v": "Job title", "s": "", "o": 1, "c": "c1"},
        "r17": {"t": 0, "n": '"organization"', "v": "Company/Organization", "s": "", "o": 1, "c": "c1"},
        "r18": {"t": 0, "n": '"email"', "v": "Email", "s": "", "o": 1, "c": "c1"},
        "r19": {"t": 0, "n": '"username"', "v": "Username", "s": "", "o": 1, "c": "c1"},
        "r20": {"t": 0, "n": '"tel"', "v": "1-888-444-2222", "s": "", "o": 1, "c": "c1"},
        "r21": {"t": 0, "n": '"tel-country-code"', "v": "1", "s": "", "o": 1, "c": "c1"},
        "r22": {"t": 0, "n": '"tel-national"', "v": "888-444-2222", "s": "", "o": 1, "c": "c1"},
        "r23": {"t": 0, "n": '"tel-area-code"', "v": "888", "s": "", "o": 1, "c": "c1"},
        "r24": {"t": 0, "n": '"tel-local"', "v": "444-2222", "s": "", "o": 1, "c": "c1"},
        "r25": {"t": 0, "n": '"tel-extension"', "v": "Extension", "s": "", "o": 1, "c": "c1"},
    },
    "variables": [],
}


class RuleStoreError(ValueError):
    """Raised when the rule store payload cannot be decoded."""


@dataclass(frozen=True)
class Category:
    key: str
    name: str = ""
    site: str = ""


@dataclass
class RuleStore:
    """Rules, categories and template variables for one autofill session."""

    rules: Dict[str, Rule] = field(default_factory=dict)
    categories: List[Category] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)

    def enabled_rules(self) -> List[Rule]:
        return [rule for rule in self.rules.values() if rule.enabled]

    def for_site(self, url: str) -> Dict[str, Rule]:
        """Rules whose site scope is empty or part of ``url``'s host."""

        host = _host_of(url)
        return {
            rule_id: rule
            for rule_id, rule in self.rules.items()
            if site_matches(rule.site, host)
        }


def _host_of(url: str) -> str:
    if not url:
        return ""
    try:
        parsed = urlparse(url)
    except ValueError:
        return ""
    return (parsed.hostname or "").lower()


def site_matches(site: str, host: str) -> bool:
    site = (site or "").strip().lower()
    if not site:
        return True
    if not host:
        return False
    return site in host


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def _as_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, str):
        return raw.strip().lower() in TRUTHY
    return bool(raw)


def build_rule(rule_id: str, record: Mapping[str, Any]) -> Optional[Rule]:
    """Creates a :class:`Rule` from a stored record, ``None`` for non-field rules."""

    rule_type = _first(record, "t", "type")
    if rule_type is not None and int(rule_type) != FIELD_RULE_TYPE:
        return None

    pattern = _first(record, "n", "pattern")
    if not isinstance(pattern, str) or not pattern:
        raise ValueError("rule has no pattern")

    value = _first(record, "v", "value")
    category = _first(record, "c", "category")

    return Rule(
        rule_id=str(rule_id),
        pattern=pattern,
        value_template="" if value is None else str(value),
        fill_mode=FillMode.parse(_first(record, "m", "mode")),
        overwrite=_as_bool(_first(record, "o", "overwrite"), False),
        site=str(_first(record, "s", "site") or ""),
        category=str(category) if category not in (None, "") else None,
        enabled=_as_bool(_first(record, "enabled"), True),
    )


def _decode(raw: Union[str, bytes, Mapping[str, Any]], what: str) -> Any:
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RuleStoreError(f"{what} is not valid JSON: {exc}") from exc
    return raw


def _parse_rules(raw: Any) -> Dict[str, Rule]:
    records = _decode(raw, "rules")
    if not isinstance(records, Mapping):
        raise RuleStoreError("rules must be a mapping of rule id to record")

    rules: Dict[str, Rule] = {}
    for rule_id, record in records.items():
        if not isinstance(record, Mapping):
            logger.warning("Skipping rule %s: record is not an object", rule_id)
            continue
        try:
            rule = build_rule(rule_id, record)
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping rule %s: %s", rule_id, exc)
            continue
        if rule is None:
            logger.debug("Skipping rule %s: not a field rule", rule_id)
            continue
        rules[rule.rule_id] = rule
    return rules


def _parse_categories(raw: Iterable[Any]) -> List[Category]:
    categories: List[Category] = []
    for entry in raw or ():
        if not isinstance(entry, Mapping):
            continue
        key = _first(entry, "k", "key")
        if key in (None, ""):
            continue
        categories.append(
            Category(
                key=str(key),
                name=str(_first(entry, "n", "name") or ""),
                site=str(_first(entry, "s", "site") or ""),
            )
        )
    return categories


def _parse_variables(raw: Any) -> Dict[str, str]:
    if isinstance(raw, Mapping):
        return {str(name): str(value) for name, value in raw.items()}

    variables: Dict[str, str] = {}
    for entry in raw or ():
        if not isinstance(entry, Mapping):
            continue
        name = _first(entry, "n", "name")
        if not name:
            continue
        value = _first(entry, "v", "value")
        variables[str(name)] = "" if value is None else str(value)
    return variables


def load_rule_store(raw: Union[str, bytes, Mapping[str, Any]]) -> RuleStore:
    """Parses a stored rule set into a :class:`RuleStore`.

    Accepts the full store layout (``cats``/``rules``/``variables``, where
    ``rules`` may itself be a JSON-encoded string) or a bare mapping of rule
    id to rule record.
    """

    data = _decode(raw, "rule store")
    if not isinstance(data, Mapping):
        raise RuleStoreError("rule store must be a JSON object")

    if "rules" not in data:
        return RuleStore(rules=_parse_rules(data))

    return RuleStore(
        rules=_parse_rules(data["rules"]),
        categories=_parse_categories(data.get("cats") or data.get("categories") or ()),
        variables=_parse_variables(data.get("variables")),
    )


def load_rule_store_file(path: Path) -> RuleStore:
    return load_rule_store(Path(path).read_text(encoding="utf-8"))


def default_rule_store() -> RuleStore:
    return load_rule_store(DEFAULT_STORE)
