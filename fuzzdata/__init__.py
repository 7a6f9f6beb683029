# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial

"""Deterministic decoding of fuzzer input bytes into typed values."""

from .buffer import Buffer
from .numeric import (
    FLOAT32,
    FLOAT64,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    FloatingType,
    HasMaxOrdinal,
    IntegralType,
    OrdinalEnum,
)
from .provider import FuzzedDataProvider
from .recipe import RecipeError, Step, parse_recipe, run_recipe
from .trace import (
    ConsumptionRecord,
    ConsumptionTrace,
    summarize_trace,
    trace_to_turtle,
    trace_triples,
)

__all__ = [
    "Buffer",
    "ConsumptionRecord",
    "ConsumptionTrace",
    "FLOAT32",
    "FLOAT64",
    "FloatingType",
    "FuzzedDataProvider",
    "HasMaxOrdinal",
    "INT16",
    "INT32",
    "INT64",
    "INT8",
    "IntegralType",
    "OrdinalEnum",
    "RecipeError",
    "Step",
    "UINT16",
    "UINT32",
    "UINT64",
    "UINT8",
    "parse_recipe",
    "run_recipe",
    "summarize_trace",
    "trace_to_turtle",
    "trace_triples",
]
