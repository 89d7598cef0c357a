"""Expansion of rule value templates.

Stages run in a fixed order, each as a full pass over the text:

1. ``{name}``   -> variable value (unknown names stay verbatim)
2. ``{#N}``     -> N random digits without a leading zero
3. ``{$N}``     -> N random alphanumeric characters
4. ``{a|b|c}``  -> one alternative picked at random
"""

from __future__ import annotations

import random
import re
import string
from typing import Mapping, Optional

VARIABLE = re.compile(r"\{(\w+)\}")
RANDOM_DIGITS = re.compile(r"\{#(\d+)\}")
RANDOM_ALNUM = re.compile(r"\{\$(\d+)\}")
CHOICE_GROUP = re.compile(r"\{([^}]+)\}")

ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits
NONZERO_DIGITS = string.digits[1:]


def random_digits(length: int, rng: random.Random) -> str:
    if length <= 0:
        return ""
    # Drawn per digit: str() of a huge int is capped by the interpreter.
    rest = "".join(rng.choice(string.digits) for _ in range(length - 1))
    return rng.choice(NONZERO_DIGITS) + rest


def random_alphanumeric(length: int, rng: random.Random) -> str:
    return "".join(rng.choice(ALPHANUMERIC) for _ in range(length))


def expand(
    template: str,
    variables: Optional[Mapping[str, str]] = None,
    rng: Optional[random.Random] = None,
) -> str:
    variables = variables or {}
    rng = rng or random.Random()

    def _variable(match: re.Match) -> str:
        value = variables.get(match.group(1))
        return match.group(0) if value is None else str(value)

    def _choice(match: re.Match) -> str:
        body = match.group(1)
        if "|" not in body:
            return match.group(0)
        return rng.choice(body.split("|"))

    text = VARIABLE.sub(_variable, template)
    text = RANDOM_DIGITS.sub(lambda match: random_digits(int(match.group(1)), rng), text)
    text = RANDOM_ALNUM.sub(lambda match: random_alphanumeric(int(match.group(1)), rng), text)
    return CHOICE_GROUP.sub(_choice, text)
