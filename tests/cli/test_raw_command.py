"""Tests for the raw command."""

import pytest

from ddq.cli.commands.raw import load_raw_body, parse_query_params
from ddq.domain.app_error import AppError, ErrorCategory


class TestParseQueryParams:
    def test_splits_on_first_equals(self):
        assert parse_query_params(["filter=a=b", "x="]) == [
            ("filter", "a=b"),
            ("x", ""),
        ]

    def test_keeps_order_and_duplicates(self):
        assert parse_query_params(["b=1", "a=2", "b=3"]) == [
            ("b", "1"),
            ("a", "2"),
            ("b", "3"),
        ]

    def test_missing_separator(self):
        with pytest.raises(AppError, match="Expected key=value") as exc_info:
            parse_query_params(["novalue"])
        assert exc_info.value.category is ErrorCategory.USAGE

    def test_empty_key(self):
        with pytest.raises(AppError, match="key cannot be empty"):
            parse_query_params(["=value"])


class TestLoadRawBody:
    @pytest.mark.asyncio
    async def test_no_body(self):
        assert await load_raw_body(None, None) is None

    @pytest.mark.asyncio
    async def test_inline_body(self):
        assert await load_raw_body('{"a": [1, 2]}', None) == {"a": [1, 2]}

    @pytest.mark.asyncio
    async def test_body_file(self, tmp_path):
        body_file = tmp_path / "body.json"
        body_file.write_text('{"title": "déploiement"}', encoding="utf-8")

        assert await load_raw_body(None, body_file) == {"title": "déploiement"}

    @pytest.mark.asyncio
    async def test_both_sources_rejected(self, tmp_path):
        with pytest.raises(AppError, match="only one of --body or --body-file"):
            await load_raw_body("{}", tmp_path / "body.json")

    @pytest.mark.asyncio
    async def test_invalid_inline_json(self):
        with pytest.raises(AppError, match="Invalid JSON passed to --body"):
            await load_raw_body("{oops", None)

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(AppError, match="Failed reading raw body file"):
            await load_raw_body(None, tmp_path / "missing.json")

    @pytest.mark.asyncio
    async def test_invalid_file_json(self, tmp_path):
        body_file = tmp_path / "body.json"
        body_file.write_text("not json", encoding="utf-8")

        with pytest.raises(AppError, match="Invalid JSON in raw body file"):
            await load_raw_body(None, body_file)


class TestRawCommand:
    def test_passes_request_through(
        self, cli_runner, app_with_mock_client, mock_client
    ):
        result = cli_runner.invoke(
            app_with_mock_client,
            [
                "raw",
                "--method",
                "post",
                "--path",
                "/api/v1/events",
                "--query",
                "a=1",
                "--query",
                "b=x=y",
                "--body",
                '{"title": "deploy"}',
            ],
        )

        assert result.exit_code == 0
        mock_client.raw.assert_awaited_once_with(
            "post",
            "/api/v1/events",
            [("a", "1"), ("b", "x=y")],
            {"title": "deploy"},
        )

    def test_without_body(self, cli_runner, app_with_mock_client, mock_client):
        result = cli_runner.invoke(
            app_with_mock_client,
            ["raw", "--method", "GET", "--path", "/api/v1/validate"],
        )

        assert result.exit_code == 0
        mock_client.raw.assert_awaited_once_with("GET", "/api/v1/validate", [], None)

    def test_body_file(self, cli_runner, app_with_mock_client, mock_client, tmp_path):
        body_file = tmp_path / "event.json"
        body_file.write_text('{"text": "hi"}', encoding="utf-8")

        result = cli_runner.invoke(
            app_with_mock_client,
            [
                "raw",
                "--method",
                "POST",
                "--path",
                "/api/v1/events",
                "--body-file",
                str(body_file),
            ],
        )

        assert result.exit_code == 0
        assert mock_client.raw.await_args.args[3] == {"text": "hi"}

    def test_body_and_body_file_is_usage_error(
        self, cli_runner, app_with_mock_client, mock_client, parse_error, tmp_path
    ):
        result = cli_runner.invoke(
            app_with_mock_client,
            [
                "raw",
                "--method",
                "POST",
                "--path",
                "/api/v1/events",
                "--body",
                "{}",
                "--body-file",
                str(tmp_path / "event.json"),
            ],
        )

        assert result.exit_code == 2
        assert parse_error(result)["category"] == "usage"
        mock_client.raw.assert_not_awaited()

    def test_bad_query_param_is_usage_error(
        self, cli_runner, app_with_mock_client, mock_client, parse_error
    ):
        result = cli_runner.invoke(
            app_with_mock_client,
            ["raw", "--method", "GET", "--path", "/api", "--query", "oops"],
        )

        assert result.exit_code == 2
        assert "Invalid query param `oops`" in parse_error(result)["message"]
        mock_client.raw.assert_not_awaited()

    def test_method_and_path_are_required(self, cli_runner, app_with_mock_client):
        result = cli_runner.invoke(app_with_mock_client, ["raw", "--method", "GET"])

        assert result.exit_code == 2
