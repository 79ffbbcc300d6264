"""
Human-readable mismatch diagnostics.

Pure functions: the same mismatches always render to the same text, in the
order the matching engine reported them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pactum.models import Mismatch, MismatchType, ObservedRequest

REPORT_HEADER = "Mock server failed with the following mismatches:"
BODY_PREVIEW_LENGTH = 20


def display_query(query: Mapping[str, Iterable[Any]]) -> str:
    """Render a query mapping as ``k=v`` pairs joined by ``&``.

    A key with several values yields one pair per value.
    """
    return "&".join(f"{key}={value}" for key, values in query.items() for value in values)


def display_headers(headers: Mapping[str, Any], indent: str) -> str:
    """Render headers as ``k: v`` lines, continuation lines indented."""
    lines = []
    for key, value in headers.items():
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        lines.append(f"{key}: {value}")
    return f"\n{indent}".join(lines)


def display_request(request: ObservedRequest, indent: str) -> str:
    """Dump a request as indented ``Method``/``Path``/... lines."""
    output = f"\n{indent}Method: {request.method}\n{indent}Path: {request.path}"

    if request.query:
        output += f"\n{indent}Query String: {display_query(request.query)}"

    if request.headers:
        output += f"\n{indent}Headers:\n{indent}  {display_headers(request.headers, indent + '  ')}"

    body = request.body_text
    if body:
        output += f"\n{indent}Body: {body[:BODY_PREVIEW_LENGTH]}... ({len(body)} length)"

    return output


def _describe(mismatch: Mismatch, index: int, indent: str) -> str:
    kind = mismatch.kind
    if kind in (MismatchType.REQUEST_NOT_FOUND, MismatchType.MISSING_REQUEST):
        if kind == MismatchType.REQUEST_NOT_FOUND:
            heading = "The following request was not expected:"
        else:
            heading = "The following request was expected but not received:"
        dump = display_request(mismatch.request, indent + "    ") if mismatch.request else ""
        return f"\n\n{indent}{index}) {heading}{dump}"

    location = f"(at {mismatch.path}) " if mismatch.path else ""
    return f"\n{indent}{index}) {mismatch.type} {location}{mismatch.to_json()}"


def generate_mismatch_report(mismatches: Iterable[Mismatch], indent: str = "  ") -> str:
    """
    Build the diagnostic message for a failed mock-service session.

    Args:
        mismatches: Mismatches in engine order (not re-sorted)
        indent: Indentation prefix for each numbered entry

    Returns:
        A multi-line message, entries numbered from 1
    """
    report = REPORT_HEADER
    for index, mismatch in enumerate(mismatches, start=1):
        report += _describe(mismatch, index, indent)
    return report
