"""
Result Normalizer Tests
-----------------------
Captured output -> NormalizedResult.

Tests cover:
- Payload extraction per tool
- stderr precedence over valid JSON
- Malformed output never raising
- Launch failures and non-zero exits
"""

import json
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import ErrorKind, ProcessLaunchError
from core.results import NormalizedResult, OrgListing, QueryRecords
from tools.invoker import CapturedOutput
from tools.normalizer import extract_org_listing, extract_query_records, normalize


def captured(stdout="", stderr="", exit_status=0):
    return CapturedOutput(stdout=stdout, stderr=stderr, exit_status=exit_status, argv=["sf"])


class TestQueryExtraction:
    """Tests for query_records payloads."""

    def test_records_extracted(self):
        result = normalize(captured('{"result":{"records":[{"Id":"1"}]}}'), extract_query_records)

        assert result.success
        assert isinstance(result.payload, QueryRecords)
        assert result.payload.to_json() == [{"Id": "1"}]

    def test_missing_records_is_empty(self):
        result = normalize(captured('{"result":{}}'), extract_query_records)

        assert result.success
        assert result.payload.to_json() == []

    def test_missing_result_is_empty(self):
        result = normalize(captured('{"status":0}'), extract_query_records)

        assert result.success
        assert len(result.payload) == 0

    def test_null_records_is_empty(self):
        result = normalize(captured('{"result":{"records":null}}'), extract_query_records)

        assert result.payload.to_json() == []

    def test_non_list_records_is_malformed(self):
        result = normalize(captured('{"result":{"records":"nope"}}'), extract_query_records)

        assert not result.success
        assert result.error.kind == ErrorKind.MALFORMED_OUTPUT_ERROR


class TestOrgListExtraction:
    """Tests for list_connected_salesforce_orgs payloads."""

    def test_whole_document_is_payload(self):
        doc = {"status": 0, "result": {"nonScratchOrgs": [{"alias": "dev"}]}}
        result = normalize(captured(json.dumps(doc)), extract_org_listing)

        assert isinstance(result.payload, OrgListing)
        assert result.payload.to_json() == doc

    def test_rendered_as_json_text(self):
        result = normalize(captured('{"result": []}'), extract_org_listing)

        assert json.loads(result.to_text()) == {"result": []}


class TestFailurePolicy:
    """Tests for the ordered failure policy."""

    def test_stderr_beats_valid_json(self):
        """Any stderr text is an ExternalToolError, even with exit 0."""
        result = normalize(
            captured('{"result":{"records":[]}}', stderr="Warning: update available\n"),
            extract_query_records,
        )

        assert result.error.kind == ErrorKind.EXTERNAL_TOOL_ERROR
        assert result.error.message == "Warning: update available\n"

    def test_invalid_json_is_malformed(self):
        result = normalize(captured("not json at all"), extract_query_records)

        assert result.error.kind == ErrorKind.MALFORMED_OUTPUT_ERROR
        assert result.error.message

    def test_empty_stdout_is_malformed(self):
        result = normalize(captured(""), extract_org_listing)

        assert result.error.kind == ErrorKind.MALFORMED_OUTPUT_ERROR

    def test_launch_error(self):
        error = ProcessLaunchError("sf", "executable not found on PATH")
        result = normalize(None, extract_org_listing, launch_error=error)

        assert result.error.kind == ErrorKind.PROCESS_LAUNCH_ERROR
        assert "sf" in result.error.message

    @pytest.mark.parametrize("status", [126, 127])
    def test_launch_exit_status(self, status):
        result = normalize(captured("", exit_status=status), extract_org_listing)

        assert result.error.kind == ErrorKind.PROCESS_LAUNCH_ERROR

    def test_nonzero_exit_uses_cli_message(self):
        stdout = json.dumps({"status": 1, "name": "NoOrgFound", "message": "No org found for alias x"})
        result = normalize(captured(stdout, exit_status=1), extract_query_records)

        assert result.error.kind == ErrorKind.EXTERNAL_TOOL_ERROR
        assert result.error.message == "No org found for alias x"

    def test_nonzero_exit_without_message(self):
        result = normalize(captured("garbage", exit_status=2), extract_query_records)

        assert result.error.kind == ErrorKind.EXTERNAL_TOOL_ERROR
        assert "status 2" in result.error.message

    def test_requires_output_or_launch_error(self):
        with pytest.raises(ValueError):
            normalize(None, extract_org_listing)


class TestNormalizedResult:
    """Tests for the tagged result type."""

    def test_exactly_one_side(self):
        with pytest.raises(ValueError):
            NormalizedResult()

    def test_error_text_is_public_payload(self):
        result = normalize(captured("x"), extract_org_listing)

        assert json.loads(result.to_text()) == {
            "error": "MalformedOutputError",
            "message": result.error.message,
        }


class TestNonStandardConstants:
    """NaN and Infinity are not JSON and must not pass as success."""

    @pytest.mark.parametrize("stdout", [
        "NaN",
        "Infinity",
        "-Infinity",
        '{"result": {"records": [{"Amount": NaN}]}}',
    ])
    def test_rejected_as_malformed(self, stdout):
        result = normalize(captured(stdout), extract_query_records)

        assert not result.success
        assert result.error.kind == ErrorKind.MALFORMED_OUTPUT_ERROR
        assert "not valid JSON" in result.error.message

    def test_render_refuses_nan(self):
        with pytest.raises(ValueError):
            NormalizedResult.ok(OrgListing(data=float("nan"))).to_text()
