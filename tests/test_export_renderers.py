"""Tests for CSV and HTML case export."""

import csv
import io
import uuid
from datetime import datetime

import pytest

from decisionhub.db.models import Analysis, DecisionCase, Simulation
from decisionhub.errors import NotFound
from decisionhub.export.renderers import csv_rows, render_csv, render_html
from decisionhub.export.service import export_case


def _case(**fields) -> DecisionCase:
    values = {
        "id": uuid.uuid4(),
        "user_id": uuid.uuid4(),
        "title": "Launch EU Site",
        "description": "Open a storefront",
        "status": "active",
        "created_at": datetime(2026, 10, 19, 9, 30),
    }
    values.update(fields)
    return DecisionCase(**values)


def _analysis() -> Analysis:
    return Analysis(summary="Pilot first", recommended_path="Pilot", probability_reasoning="Base rates")


def _simulation() -> Simulation:
    return Simulation(
        expected_value={"impact_score": 7, "confidence": 0.6},
        simulation_results={"success_rate": 0.64, "iterations": 100},
    )


class TestCsv:
    def test_every_cell_quoted(self):
        text = render_csv(_case())
        lines = text.splitlines()
        assert lines[0] == '"Field","Value"'
        assert '"Title","Launch EU Site"' in lines
        assert '"Constraints","N/A"' in lines
        assert '"Created","2026-10-19"' in lines

    def test_blank_separator_row(self):
        rows = csv_rows(_case())
        assert rows[-1] == [""]

    def test_includes_latest_results(self):
        text = render_csv(_case(risks="FX"), _analysis(), _simulation())
        lines = text.splitlines()
        assert '"Risks","FX"' in lines
        assert '"Analysis Summary","Pilot first"' in lines
        assert '"Recommended Path","Pilot"' in lines
        assert '"Expected Impact Score","7"' in lines
        assert '"Simulation Success Rate","0.64"' in lines

    def test_values_with_commas_and_quotes_survive(self):
        tricky = 'Cost, "risk", and time'
        parsed = list(csv.reader(io.StringIO(render_csv(_case(description=tricky)))))
        assert ["Description", tricky] in parsed


class TestHtml:
    def test_escapes_values(self):
        page = render_html(_case(title="<script>alert(1)</script>", context="A & B"))
        assert "<script>alert(1)</script>" not in page
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in page
        assert "A &amp; B" in page

    def test_opens_print_dialog(self):
        page = render_html(_case())
        assert page.rstrip().endswith("</html>")
        assert '<script class="no-print">window.print();</script>' in page

    def test_omits_absent_sections(self):
        page = render_html(_case())
        assert "Constraints:" not in page
        assert "AI Analysis" not in page
        assert "Risk Simulation" not in page

    def test_includes_results(self):
        page = render_html(
            _case(), _analysis(), _simulation(), generated_at=datetime(2026, 10, 19, 12, 0)
        )
        assert "<h2>AI Analysis</h2>" in page
        assert "Pilot first" in page
        assert "<h2>Risk Simulation</h2>" in page
        assert "Generated on 2026-10-19 12:00 UTC" in page


class TestExportService:
    @pytest.mark.asyncio
    async def test_csv_document(self, db, make_case, seed, owner_id):
        case = await make_case()
        await seed(Analysis(case_id=case.id, user_id=owner_id, summary="Stored summary"))

        document = await export_case(db, case.id, owner_id, "csv")

        assert document.media_type == "text/csv"
        assert document.filename == f"decision-{case.id}.csv"
        assert '"Analysis Summary","Stored summary"' in document.body

    @pytest.mark.asyncio
    async def test_html_document(self, db, make_case, owner_id):
        case = await make_case()
        document = await export_case(db, case.id, owner_id, "html")
        assert document.media_type == "text/html"

    @pytest.mark.asyncio
    async def test_invisible_case(self, db, make_case, make_user):
        case = await make_case()
        with pytest.raises(NotFound):
            await export_case(db, case.id, await make_user(), "csv")
