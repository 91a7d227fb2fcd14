import json
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import requests

from autocommit.changeset.loader import ChangeSetError, load_changes, parse_changes
from autocommit.models import UpdateFile


class DummyResponse(SimpleNamespace):
    def json(self):
        return json.loads(self.text)


def test_load_changes_from_file(tmp_path: Path):
    source = tmp_path / "changes.json"
    source.write_text(
        json.dumps(
            [
                {"path": "src/app.py", "content": "print('hi')\n"},
                {"path": "README.md", "content": "readme", "skipIfExists": True},
                {"path": "old.txt", "deleted": True},
            ]
        ),
        encoding="utf-8",
    )

    files = load_changes(source)

    assert files == [
        UpdateFile(path="src/app.py", content="print('hi')\n"),
        UpdateFile(path="README.md", content="readme", skip_if_exists=True),
        UpdateFile(path="old.txt", content="", deleted=True),
    ]


def test_load_changes_accepts_files_object_and_snake_case(tmp_path: Path):
    source = tmp_path / "changes.json"
    source.write_text(json.dumps({"files": [{"path": "a.txt", "content": None, "skip_if_exists": True}]}))

    assert load_changes(str(source)) == [UpdateFile(path="a.txt", content="", skip_if_exists=True)]


def test_load_changes_missing_file(tmp_path: Path):
    with pytest.raises(ChangeSetError):
        load_changes(tmp_path / "missing.json")


def test_load_changes_invalid_json(tmp_path: Path):
    source = tmp_path / "changes.json"
    source.write_text("{invalid")
    with pytest.raises(ChangeSetError):
        load_changes(source)


@pytest.mark.parametrize(
    "document",
    [
        "not a list",
        {"no_files": []},
        ["not an object"],
        [{"content": "missing path"}],
        [{"path": ""}],
        [{"path": "a.txt", "content": 3}],
        [{"path": "a.txt", "deleted": "yes"}],
        [{"path": "a.txt", "skipIfExists": 1}],
    ],
)
def test_parse_changes_rejects_malformed_documents(document):
    with pytest.raises(ChangeSetError):
        parse_changes(document)


class TestLoadChangesFromUrl(unittest.TestCase):
    def test_download_success(self):
        payload = [{"path": "a.txt", "content": "a"}]
        calls = []

        def fake_get(url, *_args, **kwargs):
            calls.append((url, kwargs))
            return DummyResponse(status_code=200, text=json.dumps(payload))

        with patch("requests.get", fake_get):
            files = load_changes("https://generator.example.com/changes/42", timeout=5)

        self.assertEqual(files, [UpdateFile(path="a.txt", content="a")])
        self.assertEqual(calls, [("https://generator.example.com/changes/42", {"timeout": 5})])

    def test_download_error_status(self):
        def fake_get(url, *_args, **kwargs):
            return DummyResponse(status_code=404, text="Not found")

        with patch("requests.get", fake_get):
            with self.assertRaises(ChangeSetError):
                load_changes("http://generator.example.com/changes/42")

    def test_download_invalid_json(self):
        def fake_get(url, *_args, **kwargs):
            return DummyResponse(status_code=200, text="not json")

        with patch("requests.get", fake_get):
            with self.assertRaises(ChangeSetError):
                load_changes("http://generator.example.com/changes/42")

    def test_download_connection_error(self):
        def fake_get(url, *_args, **kwargs):
            raise requests.ConnectionError("connection refused")

        with patch("requests.get", fake_get):
            with self.assertRaises(ChangeSetError):
                load_changes("http://generator.example.com/changes/42")


if __name__ == "__main__":
    unittest.main()
