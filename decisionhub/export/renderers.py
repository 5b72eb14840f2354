"""
Case export renderers.

CSV: two columns, every cell quoted, ``N/A`` for missing case fields.
HTML: print-styled page that opens the print dialog on load; every
interpolated value is escaped.
"""

import csv
import html
import io
import json
from datetime import datetime
from typing import List, Optional

from decisionhub.db.compat import utcnow
from decisionhub.db.models import Analysis, DecisionCase, Simulation

MISSING = "N/A"


def _or_missing(value) -> str:
    if value is None or value == "":
        return MISSING
    return str(value)


def _date(value: Optional[datetime]) -> str:
    return value.date().isoformat() if value else MISSING


def csv_rows(
    case: DecisionCase,
    analysis: Optional[Analysis] = None,
    simulation: Optional[Simulation] = None,
) -> List[List[str]]:
    rows = [
        ["Field", "Value"],
        ["Title", case.title],
        ["Description", case.description],
        ["Status", case.status],
        ["Context", _or_missing(case.context)],
        ["Constraints", _or_missing(case.constraints)],
        ["Objectives", _or_missing(case.objectives)],
        ["Risks", _or_missing(case.risks)],
        ["Created", _date(case.created_at)],
        [""],
    ]
    if analysis is not None:
        rows.append(["Analysis Summary", _or_missing(analysis.summary)])
        rows.append(["Recommended Path", _or_missing(analysis.recommended_path)])
        rows.append(["Probability Reasoning", _or_missing(analysis.probability_reasoning)])
    if simulation is not None:
        expected = simulation.expected_value or {}
        results = simulation.simulation_results or {}
        rows.append(["Expected Impact Score", _or_missing(expected.get("impact_score"))])
        rows.append(["Simulation Success Rate", _or_missing(results.get("success_rate"))])
    return rows


def render_csv(
    case: DecisionCase,
    analysis: Optional[Analysis] = None,
    simulation: Optional[Simulation] = None,
) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(csv_rows(case, analysis, simulation))
    return output.getvalue()


_STYLE = """
    body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }
    h1 { color: #2563eb; border-bottom: 3px solid #2563eb; padding-bottom: 10px; }
    h2 { color: #3b82f6; margin-top: 30px; }
    .section { margin: 20px 0; }
    .label { font-weight: bold; color: #64748b; }
    .badge { background: #e0f2fe; color: #0c4a6e; padding: 4px 12px; border-radius: 12px; font-size: 12px; }
    @media print {
      body { margin: 0; }
      .no-print { display: none; }
    }
"""


def _section(label: str, value) -> str:
    return (
        '<div class="section">'
        f'<div class="label">{html.escape(label)}:</div>'
        f"<p>{html.escape(str(value))}</p>"
        "</div>"
    )


def render_html(
    case: DecisionCase,
    analysis: Optional[Analysis] = None,
    simulation: Optional[Simulation] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{html.escape(case.title)}</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{html.escape(case.title)}</h1>",
        f'<p class="badge">{html.escape(case.status)}</p>',
        _section("Description", case.description),
    ]
    for label, value in (
        ("Context", case.context),
        ("Constraints", case.constraints),
        ("Objectives", case.objectives),
        ("Risks", case.risks),
    ):
        if value:
            parts.append(_section(label, value))

    if analysis is not None:
        parts.append("<h2>AI Analysis</h2>")
        parts.append(_section("Summary", _or_missing(analysis.summary)))
        parts.append(_section("Recommended Path", _or_missing(analysis.recommended_path)))
        parts.append(_section("Probability Reasoning", _or_missing(analysis.probability_reasoning)))

    if simulation is not None:
        parts.append("<h2>Risk Simulation</h2>")
        parts.append(_section("Expected Value", json.dumps(simulation.expected_value or {})))
        success_rate = (simulation.simulation_results or {}).get("success_rate")
        parts.append(_section("Success Rate", _or_missing(success_rate)))

    stamp = (generated_at or utcnow()).strftime("%Y-%m-%d %H:%M UTC")
    parts += [
        '<div class="section" style="margin-top: 40px; color: #64748b; font-size: 12px;">',
        f"Generated on {html.escape(stamp)}",
        "</div>",
        '<script class="no-print">window.print();</script>',
        "</body>",
        "</html>",
    ]
    return "\n".join(parts)
