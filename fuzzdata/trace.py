# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Consumption traces: which bytes of an input became which value.

A trace is an ordered list of records, one per public provider call. Traces
can be exported as RDF (Turtle or CURIE triples) or as a compact JSON summary,
which makes it easy to annotate a crashing input during triage.
"""

from __future__ import annotations

import json
from array import array
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import RDF

# Project Namespaces
FD = Namespace("urn:fuzzdata:trace#")


@dataclass(frozen=True)
class ConsumptionRecord:
    """Cursor positions around one provider call and the value it returned."""

    index: int
    operation: str
    front_start: int
    front_end: int
    back_start: int
    back_end: int
    value: Any

    @property
    def front_consumed(self) -> int:
        return self.front_end - self.front_start

    @property
    def back_consumed(self) -> int:
        return self.back_start - self.back_end

    @property
    def consumed(self) -> int:
        return self.front_consumed + self.back_consumed

    @property
    def region(self) -> str:
        """Where the bytes came from: front, back, or none."""
        if self.front_consumed:
            return "front"
        if self.back_consumed:
            return "back"
        return "none"


class ConsumptionTrace:
    """Ordered collection of ConsumptionRecord entries."""

    def __init__(self) -> None:
        self._records: list[ConsumptionRecord] = []

    def record(
        self,
        operation: str,
        front_start: int,
        front_end: int,
        back_start: int,
        back_end: int,
        value: Any,
    ) -> ConsumptionRecord:
        entry = ConsumptionRecord(
            index=len(self._records),
            operation=operation,
            front_start=front_start,
            front_end=front_end,
            back_start=back_start,
            back_end=back_end,
            value=value,
        )
        self._records.append(entry)
        return entry

    @property
    def records(self) -> list[ConsumptionRecord]:
        """Return a shallow copy of records to avoid external mutation."""
        return list(self._records)

    @property
    def total_consumed(self) -> int:
        return sum(entry.consumed for entry in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ConsumptionRecord]:
        return iter(self._records)


def jsonable_value(value: Any) -> Any:
    """Map a decoded value onto something json.dumps and RDF literals accept."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, array):
        return value.tobytes().hex()
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bool, int, float, str)) or value is None:
        return value
    return repr(value)


def trace_graph(trace: ConsumptionTrace) -> Graph:
    """Build an rdflib Graph with one fd:Consumption node per record."""
    graph = Graph()
    graph.bind("fd", FD)

    for entry in trace:
        node = FD[f"record{entry.index}"]
        graph.add((node, RDF.type, FD.Consumption))
        graph.add((node, FD["index"], Literal(entry.index)))
        graph.add((node, FD.operation, Literal(entry.operation)))
        graph.add((node, FD.region, Literal(entry.region)))
        graph.add((node, FD.frontOffset, Literal(entry.front_start)))
        graph.add((node, FD.frontLength, Literal(entry.front_consumed)))
        graph.add((node, FD.backOffset, Literal(entry.back_end)))
        graph.add((node, FD.backLength, Literal(entry.back_consumed)))
        if entry.value is not None:
            graph.add((node, RDF.value, Literal(jsonable_value(entry.value))))
    return graph


def trace_triples(trace: ConsumptionTrace) -> list[tuple[str, str, str]]:
    """Export triples as string tuples, using CURIEs for bound namespaces."""
    graph = trace_graph(trace)
    manager = graph.namespace_manager
    triples = []
    for s, p, o in graph:
        s_q = manager.normalizeUri(s)
        p_q = manager.normalizeUri(p)
        o_q = manager.normalizeUri(o) if isinstance(o, URIRef) else str(o)
        triples.append((s_q, p_q, o_q))
    return triples


def trace_to_turtle(trace: ConsumptionTrace) -> str:
    """Serialize a trace to Turtle format."""
    return trace_graph(trace).serialize(format="turtle")


def summarize_trace(trace: ConsumptionTrace, input_size: int | None = None) -> str:
    """Return a JSON summary of the trace."""
    info: dict[str, Any] = {
        "operations": len(trace),
        "consumed": trace.total_consumed,
    }
    if input_size is not None:
        info["input_size"] = input_size
        info["unconsumed"] = input_size - trace.total_consumed
    info["records"] = [
        {
            "index": entry.index,
            "operation": entry.operation,
            "region": entry.region,
            "offset": entry.front_start if entry.region == "front" else entry.back_end,
            "length": entry.consumed,
            "value": jsonable_value(entry.value),
        }
        for entry in trace
    ]
    return json.dumps(info, indent=2)
