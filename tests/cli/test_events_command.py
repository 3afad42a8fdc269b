"""Tests for the events command."""

from ddq.domain.outcome import ClassifiedError
from ddq.domain.requests import EventsQuery


class TestEventsCommand:
    def test_defaults(self, cli_runner, app_with_mock_client, mock_client):
        result = cli_runner.invoke(app_with_mock_client, ["events"])

        assert result.exit_code == 0
        mock_client.query_events.assert_awaited_once_with(EventsQuery())

    def test_all_options(self, cli_runner, app_with_mock_client, mock_client):
        result = cli_runner.invoke(
            app_with_mock_client,
            [
                "events",
                "--query",
                "source:deploy",
                "--from",
                "now-1d",
                "--to",
                "now",
                "--limit",
                "5",
                "--sort",
                "asc",
            ],
        )

        assert result.exit_code == 0
        mock_client.query_events.assert_awaited_once_with(
            EventsQuery(
                query="source:deploy",
                from_time="now-1d",
                to_time="now",
                limit=5,
                sort="asc",
            )
        )

    def test_invalid_sort_is_usage_error(
        self, cli_runner, app_with_mock_client, mock_client, parse_error
    ):
        mock_client.query_events.return_value = ClassifiedError.invalid_request(
            "Invalid sort `sideways`. Use `asc` or `desc` for events queries."
        )

        result = cli_runner.invoke(
            app_with_mock_client, ["events", "--sort", "sideways"]
        )

        assert result.exit_code == 2
        assert parse_error(result)["category"] == "usage"
