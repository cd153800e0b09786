"""Tests for the command-line audit."""

import json
from unittest.mock import patch

from main import format_report, main, run_audit
from search.errors import UpstreamError
from search.models import SearchOutcome, NormalizedResult


def _outcome():
    return SearchOutcome(
        query="Acme Realty",
        status="machine-verified",
        result=NormalizedResult(name="Acme Realty", entity_id="kg:/g/11x", types=["RealEstateAgent"], result_score=600),
    )


class TestRunAudit:
    def test_success(self):
        with patch("main.search_entity", return_value=_outcome()):
            view = run_audit("Acme Realty")
        assert view.display_score == 98
        assert "kg:/g/11x" in format_report(view)

    def test_failure_becomes_error_view(self):
        with patch("main.search_entity", side_effect=UpstreamError("Knowledge Graph API error: 500", status_code=500)):
            view = run_audit("Acme")
        assert view.status == "error"
        assert format_report(view) == "Error: Knowledge Graph API error: 500"


class TestMain:
    def test_json_output(self, capsys):
        with patch("main.search_entity", return_value=_outcome()):
            code = main(["Acme Realty", "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "machine-verified"
        assert data["band"] == "high"

    def test_error_exit_code(self, capsys):
        with patch("main.search_entity", side_effect=UpstreamError("Knowledge Graph API error: 500")):
            assert main(["Acme"]) == 1
        assert "Error:" in capsys.readouterr().out
