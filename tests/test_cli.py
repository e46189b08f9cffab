"""Tests for the command-line client."""
import io
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.cli.prioritize import (
    FAILURE_MESSAGE,
    build_parser,
    collect_tasks,
    main,
    render_result,
    request_prioritization,
)
from app.core.exceptions import PrioritizeRequestError
from app.services.ai.response_normalizer import normalize_service_payload

from tests.conftest import TASKS

STRUCTURED_BODY = {"items": [
    {"index": 3, "priority": "urgent"},
    {"index": 2, "priority": "important"},
    {"index": 1, "priority": "low"},
]}


class TtyStream(io.StringIO):
    def isatty(self):
        return True


def make_response(status_code=200, body=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


class TestCollectTasks:

    def test_arguments_are_stripped(self):
        args = build_parser().parse_args(["  a ", "", "b"])
        assert collect_tasks(args, stdin=TtyStream()) == ["a", "b"]

    def test_file_lines(self, tmp_path):
        task_file = tmp_path / "tasks.txt"
        task_file.write_text("first\n\n  second  \n", encoding="utf-8")

        args = build_parser().parse_args(["--file", str(task_file)])

        assert collect_tasks(args, stdin=TtyStream()) == ["first", "second"]

    def test_piped_stdin(self):
        args = build_parser().parse_args([])
        assert collect_tasks(args, stdin=io.StringIO("one\ntwo\n")) == ["one", "two"]

    def test_stdin_ignored_when_arguments_given(self):
        args = build_parser().parse_args(["arg"])
        assert collect_tasks(args, stdin=io.StringIO("piped")) == ["arg"]


class TestRequestPrioritization:

    def test_posts_tasks(self):
        session = MagicMock()
        session.post.return_value = make_response(body=STRUCTURED_BODY)

        body = request_prioritization(TASKS, base_url="http://host:1/", timeout=5, session=session)

        assert body == STRUCTURED_BODY
        session.post.assert_called_once_with(
            "http://host:1/api/prioritize", json={"tasks": TASKS}, timeout=5
        )

    def test_error_status(self):
        session = MagicMock()
        session.post.return_value = make_response(
            status_code=500, text='{"error":"Cohere not configured (missing COHERE_API_KEY)"}'
        )

        with pytest.raises(PrioritizeRequestError) as exc_info:
            request_prioritization(TASKS, session=session)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message.startswith("API error: 500")

    def test_transport_error(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(PrioritizeRequestError):
            request_prioritization(TASKS, session=session)

    def test_non_json_body(self):
        session = MagicMock()
        session.post.return_value = make_response(body=ValueError("nope"))

        with pytest.raises(PrioritizeRequestError):
            request_prioritization(TASKS, session=session)


class TestRenderResult:

    def test_structured_ranking(self):
        result = normalize_service_payload(STRUCTURED_BODY, 3)

        output = render_result(TASKS, result)

        lines = output.splitlines()
        assert lines[0] == "Prioritized Tasks:"
        assert lines[2] == "#1   [URGENT] Fix critical bug in production"
        assert lines[3] == "#2   [IMPORTANT] Plan team meeting for next week"
        assert lines[4] == "#3   [LOW] Research new project ideas"
        assert lines[-1] == (
            "Priority Legend: Urgent - Do first, Important - Do today, Low - When possible"
        )

    def test_legacy_ranking(self):
        result = normalize_service_payload({"text": "3, 1, 2"}, 3)

        output = render_result(TASKS, result)

        assert "#1   [URGENT] Fix critical bug in production" in output
        assert "#2   [IMPORTANT] Research new project ideas" in output
        assert "#3   [LOW] Plan team meeting for next week" in output


class TestMain:

    @patch("app.cli.prioritize.request_prioritization")
    def test_success(self, mock_request, capsys):
        mock_request.return_value = STRUCTURED_BODY

        exit_code = main(list(TASKS), stdin=TtyStream())

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "#1   [URGENT] Fix critical bug in production" in out
        mock_request.assert_called_once_with(TASKS, base_url="http://localhost:8787", timeout=120)

    @patch("app.cli.prioritize.request_prioritization")
    def test_json_output(self, mock_request, capsys):
        mock_request.return_value = STRUCTURED_BODY

        exit_code = main(["--json"] + list(TASKS), stdin=TtyStream())

        assert exit_code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["items"][0] == {
            "index": 3,
            "priority": "urgent",
            "rank": 1,
            "task": "Fix critical bug in production",
        }

    @patch("app.cli.prioritize.request_prioritization")
    def test_failure_message(self, mock_request, capsys):
        mock_request.side_effect = PrioritizeRequestError("500 boom", status_code=500)

        exit_code = main(["a task"], stdin=TtyStream())

        assert exit_code == 1
        assert FAILURE_MESSAGE in capsys.readouterr().err

    @patch("app.cli.prioritize.request_prioritization")
    def test_no_tasks(self, mock_request, capsys):
        exit_code = main([], stdin=TtyStream())

        assert exit_code == 2
        assert "no tasks given" in capsys.readouterr().err
        mock_request.assert_not_called()

    def test_unreadable_file(self, tmp_path, capsys):
        exit_code = main(["--file", str(tmp_path / "missing.txt")], stdin=TtyStream())

        assert exit_code == 2
        assert "could not read tasks" in capsys.readouterr().err
