"""Unit tests for the command-line interface.

Run with: pytest tests/unit/test_cli.py -v
"""

import json

from click.testing import CliRunner

from caseintake.api.auth import decode_access_token
from caseintake.cli import main


class TestIngestPreview:
    def test_text_output(self, tmp_path, sample_csv):
        path = tmp_path / "intake.csv"
        path.write_bytes(sample_csv)

        result = CliRunner().invoke(main, ["ingest", "preview", str(path)])

        assert result.exit_code == 0
        assert "intake.csv: 2 records" in result.output
        assert "Jane Doe" in result.output

    def test_json_output(self, tmp_path, sample_json_records):
        path = tmp_path / "partner.json"
        path.write_text(json.dumps(sample_json_records))

        result = CliRunner().invoke(main, ["ingest", "preview", "--json", str(path)])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["previews"][0]["count"] == 2
        assert data["previews"][0]["rows"][0]["case_external_id"] == "EXT-100"

    def test_commit_aborts_on_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops")

        result = CliRunner().invoke(main, ["ingest", "commit", str(path)])

        assert result.exit_code == 1

    def test_commit_aborts_on_row_without_contact(self, tmp_path):
        path = tmp_path / "intake.csv"
        path.write_text("name,phone,species\n,,Dog\n")

        result = CliRunner().invoke(main, ["ingest", "commit", str(path)])

        assert result.exit_code == 1
        assert "rows: 1" in result.output
        assert "Submitted" not in result.output


class TestDbInit:
    def test_creates_schema(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"

        result = CliRunner().invoke(main, ["db", "init", "--url", url])

        assert result.exit_code == 0
        assert (tmp_path / "cli.db").exists()


class TestTokenIssue:
    def test_issues_decodable_token(self):
        result = CliRunner().invoke(main, ["token", "issue", "--user-id", "u-5", "--role", "admin"])

        assert result.exit_code == 0
        payload = decode_access_token(result.output.strip())
        assert payload.sub == "u-5"
        assert payload.role == "admin"
