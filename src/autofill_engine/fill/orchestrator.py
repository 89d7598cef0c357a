"""Runs a rule set over a set of identified fields."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from ..core.config import AutofillConfig
from ..core.dom import LiveDocument
from ..core.models import FieldDescriptor, FillError, FillResult, Rule
from ..core.rules import RuleStore
from ..identify.identifier import FieldIdentifier
from ..matching.matcher import match_fields
from .executor import FillExecutor, Sleep

logger = logging.getLogger(__name__)

RuleSet = Union[Mapping[str, Rule], Iterable[Rule]]


def _ordered_rules(rules: RuleSet) -> List[Rule]:
    if isinstance(rules, Mapping):
        return list(rules.values())
    return list(rules)


class AutofillPass:
    """One sequential autofill run: rules in order, fields in order, one fill at a time."""

    def __init__(self, executor: Optional[FillExecutor] = None) -> None:
        self.executor = executor or FillExecutor()

    async def run(
        self,
        rules: RuleSet,
        fields: Sequence[FieldDescriptor],
        category: Optional[str] = None,
        force_overwrite: bool = False,
    ) -> FillResult:
        result = FillResult()

        for rule in _ordered_rules(rules):
            if not rule.enabled:
                continue
            if category and rule.category != category:
                continue

            for field in match_fields(rule, fields):
                try:
                    if await self.executor.fill(field, rule, force_overwrite):
                        result.filled += 1
                except Exception as exc:
                    logger.debug(
                        "Rule %s failed on field %s", rule.rule_id, field.identifier, exc_info=True
                    )
                    result.errors.append(
                        FillError(field=field.identifier, rule=rule.rule_id, message=str(exc))
                    )

        return result

    def run_sync(
        self,
        rules: RuleSet,
        fields: Sequence[FieldDescriptor],
        category: Optional[str] = None,
        force_overwrite: bool = False,
    ) -> FillResult:
        return asyncio.run(self.run(rules, fields, category, force_overwrite))


async def autofill_document(
    document: LiveDocument,
    store: RuleStore,
    *,
    category: Optional[str] = None,
    force_overwrite: Optional[bool] = None,
    config: Optional[AutofillConfig] = None,
    sleep: Optional[Sleep] = None,
    rng: Optional[random.Random] = None,
) -> FillResult:
    """Identifies the document's fields and applies the store's rules for its site."""

    config = config or AutofillConfig()
    fields = FieldIdentifier(document, config).identify()
    rules = store.for_site(document.url)
    logger.debug("Autofill on %s: %d fields, %d rules", document.url, len(fields), len(rules))

    executor = FillExecutor(config, sleep=sleep, variables=store.variables, rng=rng)
    return await AutofillPass(executor).run(
        rules,
        fields,
        category=category,
        force_overwrite=config.force_overwrite if force_overwrite is None else force_overwrite,
    )
