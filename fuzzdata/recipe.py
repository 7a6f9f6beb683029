# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Textual decode recipes.

A recipe lists the provider calls a harness makes, in order, so the same
decoding can be replayed outside the harness (e.g. on a crash input):

    uint8 int:10:30 bytes:4 rstr:16 float32:0:1 pick:get,put,delete

Steps are separated by whitespace; arguments by colons. `parse_recipe` turns
the text into Step objects and `run_recipe` applies them to a provider.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .numeric import FLOAT64, FLOATING_TYPES, INTEGRAL_TYPES
from .provider import FuzzedDataProvider

logger = logging.getLogger(__name__)


class RecipeError(ValueError):
    """Raised when a recipe step cannot be parsed."""


@dataclass(frozen=True)
class Step:
    """One recipe step: an operation name plus its raw string arguments."""

    name: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        return ":".join((self.name, *self.args))

    def apply(self, provider: FuzzedDataProvider) -> Any:
        """Run this step against `provider` and return the decoded value."""
        name, args = self.name, self.args

        if name == "bytes":
            return provider.consume_bytes(_int_arg(self, 0))
        if name == "bytes0":
            terminator = _int_arg(self, 1) if len(args) > 1 else 0
            return provider.consume_bytes_with_terminator(_int_arg(self, 0), terminator)
        if name == "str":
            return provider.consume_bytes_as_string(_int_arg(self, 0))
        if name == "rstr":
            return provider.consume_random_length_string(
                _int_arg(self, 0) if args else None
            )
        if name == "rest":
            return provider.consume_remaining_bytes()
        if name == "reststr":
            return provider.consume_remaining_bytes_as_string()
        if name == "bool":
            return provider.consume_bool()
        if name == "int":
            return provider.consume_integral_in_range(_int_arg(self, 0), _int_arg(self, 1))
        if name == "prob":
            float_type = FLOATING_TYPES[args[0]] if args else FLOAT64
            return provider.consume_probability(float_type)
        if name == "pick":
            return provider.pick_value_in_array(args[0].split(","))
        if name in INTEGRAL_TYPES:
            int_type = INTEGRAL_TYPES[name]
            if args:
                return provider.consume_integral_in_range(
                    _int_arg(self, 0), _int_arg(self, 1), int_type
                )
            return provider.consume_integral(int_type)
        if name in FLOATING_TYPES:
            float_type = FLOATING_TYPES[name]
            if args:
                return provider.consume_floating_point_in_range(
                    _float_arg(self, 0), _float_arg(self, 1), float_type
                )
            return provider.consume_floating_point(float_type)
        raise RecipeError(f"unknown recipe step: {self}")  # pragma: no cover - parse rejects


# Allowed argument counts per step name.
_ARITY: dict[str, tuple[int, ...]] = {
    "bytes": (1,),
    "bytes0": (1, 2),
    "str": (1,),
    "rstr": (0, 1),
    "rest": (0,),
    "reststr": (0,),
    "bool": (0,),
    "int": (2,),
    "prob": (0, 1),
    "pick": (1,),
}
_ARITY.update({name: (0, 2) for name in INTEGRAL_TYPES})
_ARITY.update({name: (0, 2) for name in FLOATING_TYPES})


def _int_arg(step: Step, position: int) -> int:
    try:
        return int(step.args[position], 0)
    except ValueError as error:
        raise RecipeError(f"{step}: expected an integer, got {step.args[position]!r}") from error


def _float_arg(step: Step, position: int) -> float:
    try:
        return float(step.args[position])
    except ValueError as error:
        raise RecipeError(f"{step}: expected a number, got {step.args[position]!r}") from error


def parse_step(token: str) -> Step:
    """Parse a single `name[:arg[:arg]]` token."""
    name, *args = token.split(":")
    step = Step(name.lower(), tuple(args))
    arity = _ARITY.get(step.name)
    if arity is None:
        raise RecipeError(f"unknown recipe step: {token}")
    if len(args) not in arity:
        expected = " or ".join(str(count) for count in arity)
        raise RecipeError(f"{token}: expected {expected} argument(s), got {len(args)}")

    # Validate numeric arguments up front so bad recipes fail before decoding.
    if step.name in FLOATING_TYPES:
        for position in range(len(args)):
            _float_arg(step, position)
    elif step.name == "prob":
        if args and args[0] not in FLOATING_TYPES:
            raise RecipeError(f"{token}: unknown floating type {args[0]!r}")
    elif step.name == "pick":
        if not args[0]:
            raise RecipeError(f"{token}: pick needs at least one value")
    else:
        for position in range(len(args)):
            _int_arg(step, position)
    return step


def parse_recipe(text: str | Iterable[str]) -> list[Step]:
    """Parse a whitespace separated recipe (or an iterable of tokens)."""
    tokens = text.split() if isinstance(text, str) else [t for part in text for t in part.split()]
    return [parse_step(token) for token in tokens]


def run_recipe(provider: FuzzedDataProvider, steps: Iterable[Step]) -> list[Any]:
    """Apply every step in order and return the decoded values."""
    values = []
    for step in steps:
        value = step.apply(provider)
        logger.debug("%s -> %r (%d bytes left)", step, value, provider.remaining_bytes)
        values.append(value)
    return values
