"""Tests for the CLI interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from subreddit_media.cli import main
from subreddit_media.config import load_config
from subreddit_media.errors import SourceNotFound
from subreddit_media.models import ScrapeResult


def _json_rows(output: str):
    """Parse the JSON array out of output that also carries stderr lines."""
    lines = output.splitlines()
    start = next(i for i, line in enumerate(lines) if line.startswith("["))
    return json.loads("\n".join(lines[start:]))


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.toml"


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Subreddit Media" in result.output

    def test_fetch_prints_images(self, runner, config_path, sample_posts):
        scrape = ScrapeResult(
            media=sample_posts[:1], fetched_count=3, message="Fetched 1 images."
        )
        with patch("subreddit_media.scraper.scrape_subreddit", return_value=scrape) as m:
            result = runner.invoke(
                main,
                ["--config", str(config_path), "fetch", "https://www.reddit.com/r/pics/"],
            )

        assert result.exit_code == 0
        assert "Fetched 1 images." in result.output
        assert "https://i.redd.it/abc.jpg" in result.output
        assert m.call_args.args[1] == 25  # default limit from config

    def test_fetch_json(self, runner, config_path, sample_posts):
        scrape = ScrapeResult(media=sample_posts[:1], fetched_count=1, message="")
        with patch("subreddit_media.scraper.scrape_subreddit", return_value=scrape):
            result = runner.invoke(
                main,
                [
                    "--config",
                    str(config_path),
                    "fetch",
                    "https://www.reddit.com/r/pics/",
                    "--json",
                    "-n",
                    "10",
                ],
            )

        assert result.exit_code == 0
        rows = _json_rows(result.output)
        assert rows[0]["media_url"] == "https://i.redd.it/abc.jpg"
        assert rows[0]["media_type"] == "image"

    def test_fetch_json_empty_keeps_message(self, runner, config_path):
        scrape = ScrapeResult(
            media=[], fetched_count=0, message="Found 0 suitable images in r/pics."
        )
        with patch("subreddit_media.scraper.scrape_subreddit", return_value=scrape):
            result = runner.invoke(
                main,
                [
                    "--config",
                    str(config_path),
                    "fetch",
                    "https://www.reddit.com/r/pics/",
                    "--json",
                ],
            )

        assert result.exit_code == 0
        assert "Found 0 suitable images in r/pics." in result.output
        assert _json_rows(result.output) == []

    def test_fetch_invalid_config_exits_cleanly(self, runner, config_path):
        config_path.write_text("[fetch]\nlimit = 2.7\n")
        result = runner.invoke(
            main,
            ["--config", str(config_path), "fetch", "https://www.reddit.com/r/pics/"],
        )

        assert result.exit_code == 1
        assert "Invalid config" in result.output
        assert "Traceback" not in result.output

    def test_fetch_error_exits_nonzero(self, runner, config_path):
        with patch(
            "subreddit_media.scraper.scrape_subreddit",
            side_effect=SourceNotFound("Subreddit 'r/nope' not found", status_code=404),
        ):
            result = runner.invoke(
                main,
                ["--config", str(config_path), "fetch", "https://www.reddit.com/r/nope/"],
            )

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_fetch_limit_out_of_range(self, runner, config_path):
        result = runner.invoke(
            main,
            [
                "--config",
                str(config_path),
                "fetch",
                "https://www.reddit.com/r/pics/",
                "-n",
                "101",
            ],
        )
        assert result.exit_code != 0

    def test_hosts_includes_configured(self, runner, config_path):
        config_path.write_text('[images]\nremote_hostnames = ["cdn.example.com"]\n')
        result = runner.invoke(main, ["--config", str(config_path), "hosts"])
        assert result.exit_code == 0
        assert "cdn.example.com" in result.output
        assert "i.redd.it" in result.output

    def test_setup_writes_config(self, runner, config_path):
        result = runner.invoke(
            main,
            ["--config", str(config_path), "setup"],
            input="i.imgur.com, cdn.example.com\n40\n10\n",
        )
        assert result.exit_code == 0
        assert "Config saved" in result.output

        config = load_config(config_path)
        assert config.remote_hostnames == ["i.imgur.com", "cdn.example.com"]
        assert config.limit == 40
        assert config.timeout == 10.0

    def test_status_reports_missing_credentials(self, runner, config_path, monkeypatch):
        monkeypatch.delenv("REDDIT_CLIENT_ID", raising=False)
        monkeypatch.delenv("REDDIT_CLIENT_SECRET", raising=False)
        result = runner.invoke(main, ["--config", str(config_path), "status"])
        assert result.exit_code == 0
        assert "Credentials: Missing" in result.output
        assert "Config: Defaults" in result.output
