"""
Tests for the command-line interface.
"""

import json
from unittest.mock import MagicMock

import pytest

from quotation_toolkit import cli


@pytest.fixture
def record_file(tmp_path, valid_record):
    path = tmp_path / "quote.json"
    path.write_text(json.dumps(valid_record), encoding="utf-8")
    return path


class TestTemplate:

    def test_template_prints_blank_record(self, capsys):
        assert cli.main(["template"]) == cli.EXIT_OK

        record = json.loads(capsys.readouterr().out)
        assert record["companyName"] == ""
        assert len(record["lineItems"]) == 1
        assert record["terms"]


class TestValidate:

    def test_validate_when_valid_then_ok(self, record_file, capsys):
        assert cli.main(["validate", str(record_file)]) == cli.EXIT_OK
        assert capsys.readouterr().out.strip() == "OK"

    def test_validate_when_invalid_then_failures_listed(self, tmp_path, record_factory, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(record_factory(customerName="")), encoding="utf-8")

        assert cli.main(["validate", str(path)]) == cli.EXIT_INVALID
        assert "customerName" in capsys.readouterr().err

    def test_validate_when_file_missing_then_error(self, tmp_path, capsys):
        assert cli.main(["validate", str(tmp_path / "missing.json")]) == cli.EXIT_ERROR
        assert "could not read" in capsys.readouterr().err

    def test_validate_when_not_json_object_then_error(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        assert cli.main(["validate", str(path)]) == cli.EXIT_ERROR


class TestRender:

    def test_render_writes_pdf_to_out_dir(self, record_file, tmp_path, capsys):
        out = tmp_path / "out"

        assert cli.main(["render", str(record_file), "--out", str(out)]) == cli.EXIT_OK

        assert (out / "Q-1001.pdf").read_bytes().startswith(b"%PDF-")
        assert "Wrote 1 page(s)" in capsys.readouterr().out

    def test_render_when_stdout_then_pdf_bytes(self, record_file, capsysbinary):
        assert cli.main(["render", str(record_file), "--stdout"]) == cli.EXIT_OK

        assert capsysbinary.readouterr().out.startswith(b"%PDF-")

    def test_render_when_header_file_relative_to_record(self, tmp_path, record_factory, sample_image, capsys):
        path = tmp_path / "quote.json"
        path.write_text(json.dumps(record_factory(headerImage=sample_image.name)), encoding="utf-8")

        code = cli.main(["render", str(path), "--out", str(tmp_path)])

        assert code == cli.EXIT_OK
        assert (tmp_path / "Q-1001.pdf").exists()

    def test_render_when_invalid_then_exit_invalid(self, tmp_path, record_factory):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(record_factory(lineItems=[])), encoding="utf-8")

        assert cli.main(["render", str(path), "--out", str(tmp_path)]) == cli.EXIT_INVALID
        assert not (tmp_path / "Q-1001.pdf").exists()

    def test_render_when_drive_token_then_uploaded(self, record_file, monkeypatch, capsys):
        uploader = MagicMock()
        uploader.find_or_create_folder.return_value = "folder-1"
        uploader.upload_pdf.return_value = "file-9"
        factory = MagicMock(return_value=uploader)
        monkeypatch.setattr(cli, "DriveUploader", factory)

        code = cli.main(["render", str(record_file), "--drive-token", "tok", "--folder", "Quotes"])

        assert code == cli.EXIT_OK
        factory.assert_called_once_with("tok")
        uploader.find_or_create_folder.assert_called_once_with("Quotes")
        data, filename, folder_id = uploader.upload_pdf.call_args.args
        assert data.startswith(b"%PDF-")
        assert (filename, folder_id) == ("Q-1001.pdf", "folder-1")
        assert "file-9" in capsys.readouterr().out

    def test_render_when_upload_fails_then_error(self, record_file, monkeypatch):
        uploader = MagicMock()
        uploader.find_or_create_folder.side_effect = cli.UploadError("Failed to search for folder. Status: 401", 401)
        monkeypatch.setattr(cli, "DriveUploader", MagicMock(return_value=uploader))

        assert cli.main(["render", str(record_file), "--drive-token", "tok"]) == cli.EXIT_ERROR

    def test_render_stdout_and_drive_are_exclusive(self, record_file):
        with pytest.raises(SystemExit):
            cli.main(["render", str(record_file), "--stdout", "--drive-token", "tok"])
