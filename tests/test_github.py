import json
from unittest.mock import Mock, patch

import pytest
import requests

from zeroplugins.github import (
    format_repository,
    net_get,
    notnull,
    parse_command,
    preview_url,
    search_repository,
)

REPO = {
    "full_name": "owner/project",
    "description": "A project",
    "watchers": 12,
    "forks": 3,
    "open_issues": 4,
    "language": "Go",
    "license": {"key": "mit"},
    "pushed_at": "2022-10-01T00:00:00Z",
    "html_url": "https://example.com/owner/project",
}


def test_parse_command():
    assert parse_command(">github -p foo") == ("-p ", "foo")
    assert parse_command(">github -t foo bar") == ("-t ", "foo bar")
    assert parse_command(">github foo") == ("", "foo")
    assert parse_command("github foo") is None


def test_notnull():
    assert notnull("") == "None"
    assert notnull("Go") == "Go"


def test_search_builds_query():
    seen = {}

    def fake_get(url, headers):
        seen["url"] = url
        seen["headers"] = headers
        return json.dumps({"total_count": 1, "items": [REPO]}).encode()

    repo = search_repository("zero bot", fake_get)
    assert repo == REPO
    assert seen["url"] == "https://api.github.com/search/repositories?q=zero+bot"
    assert seen["headers"]["User-Agent"].startswith("Mozilla/5.0")


def test_search_not_found():
    def fake_get(url, headers):
        return b'{"total_count": 0, "items": []}'

    with pytest.raises(LookupError):
        search_repository("nothing", fake_get)


def test_format_repository():
    text = format_repository(REPO)
    lines = text.split("\n")
    assert lines[0] == "owner/project"
    assert lines[1] == "Description: A project"
    assert lines[2] == "Star/Fork/Issue: 12/3/4"
    assert lines[3] == "Language: Go"
    assert lines[4] == "License: MIT"
    assert lines[5] == "Last pushed: 2022-10-01T00:00:00Z"
    assert lines[6] == "Jump: https://example.com/owner/project"
    assert text.endswith("\n")


def test_format_repository_missing_fields():
    text = format_repository({"full_name": "a/b", "license": None, "language": None})
    assert "Language: None\n" in text
    assert "License: None\n" in text
    assert "Star/Fork/Issue: 0/0/0\n" in text


def test_preview_url():
    assert preview_url("owner/project") == "https://opengraph.githubassets.com/0/owner/project"


@patch("zeroplugins.github.requests.get")
def test_net_get_error_status(mock_get):
    mock_get.return_value = Mock(status_code=404, content=b"")
    with pytest.raises(requests.HTTPError, match="code 404"):
        net_get("https://example.com/x", {})


@patch("zeroplugins.github.requests.get")
def test_net_get_ok(mock_get):
    mock_get.return_value = Mock(status_code=200, content=b"body")
    assert net_get("https://example.com/x", {"User-Agent": "ua"}) == b"body"
    assert mock_get.call_args.kwargs["headers"] == {"User-Agent": "ua"}