"""Tests for batch reads."""

from unittest.mock import MagicMock

import pytest

from jina_cli.batch import load_url_list, parse_url_list, read_batch
from jina_cli.errors import HTTPStatusError, TransportError, UsageError
from jina_cli.models.api import ReadRequest, ReadResponse


class TestUrlList:
    """Test URL list parsing."""

    def test_skips_blank_and_comment_lines(self):
        """Test that only URL lines survive, in order."""
        text = "# docs to fetch\nhttps://a.com\n\n   \n  https://b.com  \n#https://skipped.com\n"

        assert parse_url_list(text) == ["https://a.com", "https://b.com"]

    def test_empty(self):
        """Test an empty list."""
        assert parse_url_list("") == []

    def test_load_from_file(self, tmp_path):
        """Test reading a list from disk."""
        path = tmp_path / "urls.txt"
        path.write_text("https://a.com\r\nhttps://b.com\r\n")

        assert load_url_list(path) == ["https://a.com", "https://b.com"]

    def test_load_rejects_non_utf8(self, tmp_path):
        """Test that undecodable bytes are reported as a usage error."""
        path = tmp_path / "urls.txt"
        path.write_bytes(b"https://a.com/\xff\xfe\n")

        with pytest.raises(UsageError, match="not valid UTF-8"):
            load_url_list(path)


class TestReadBatch:
    """Test read_batch."""

    def test_results_in_input_order(self):
        """Test one record per URL with failures kept inline."""
        client = MagicMock()
        client.read.side_effect = [
            ReadResponse(content="# A\nbody", url="https://a.com", title="A"),
            HTTPStatusError(500, "server exploded"),
            ReadResponse(content="plain", url="https://c.com"),
        ]

        results = read_batch(client, ["https://a.com", "https://b.com", "https://c.com"], ReadRequest(url=""))

        assert results[0] == {"url": "https://a.com", "title": "A", "content": "# A\nbody"}
        assert results[1]["url"] == "https://b.com"
        assert "500" in results[1]["error"]
        assert "content" not in results[1]
        assert results[2] == {"url": "https://c.com", "content": "plain"}

    def test_template_options_applied(self):
        """Test that every request carries the shared read options."""
        client = MagicMock()
        client.read.side_effect = lambda req: ReadResponse(content="", url=req.url)
        template = ReadRequest(
            url="",
            post=True,
            response_format="text",
            target_selector="main",
            headers={"X-Extra": "1"},
        )

        read_batch(client, ["https://a.com", "https://b.com"], template)

        sent = [call.args[0] for call in client.read.call_args_list]
        assert [req.url for req in sent] == ["https://a.com", "https://b.com"]
        assert all(req.post and req.response_format == "text" for req in sent)
        assert all(req.target_selector == "main" and req.headers == {"X-Extra": "1"} for req in sent)
        assert template.url == ""

    def test_all_failures_do_not_raise(self):
        """Test that a batch of failures still returns records."""
        client = MagicMock()
        client.read.side_effect = TransportError("Request failed: connection refused")

        results = read_batch(client, ["https://a.com", "https://b.com"], ReadRequest(url=""))

        assert results == [
            {"url": "https://a.com", "error": "Request failed: connection refused"},
            {"url": "https://b.com", "error": "Request failed: connection refused"},
        ]

    def test_progress_callback(self):
        """Test 1-based progress notifications."""
        client = MagicMock()
        client.read.side_effect = lambda req: ReadResponse(content="", url=req.url)
        progress = MagicMock()

        read_batch(client, ["https://a.com", "https://b.com"], ReadRequest(url=""), on_progress=progress)

        assert [call.args for call in progress.call_args_list] == [
            (1, 2, "https://a.com"),
            (2, 2, "https://b.com"),
        ]

    def test_empty_batch(self):
        """Test that no URLs means no requests."""
        client = MagicMock()

        assert read_batch(client, [], ReadRequest(url="")) == []
        client.read.assert_not_called()
