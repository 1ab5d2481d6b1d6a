"""Tests for rendering tool responses."""

from mcp_server_git_remote.core.formatter import ToolResponse, error_response, format_response
from mcp_server_git_remote.error_handling import ErrorKind
from mcp_server_git_remote.git.models import (
    GitFetch,
    GitPull,
    GitPush,
    GitRemoteAdd,
    GitRemoteList,
    RemoteInfo,
)
from mcp_server_git_remote.git.result import GitResult

REPO = "/srv/project"


class TestSuccessRendering:
    def test_remote_add(self):
        params = GitRemoteAdd(path=REPO, name="upstream", url="https://example.com/org/repo.git")

        response = format_response("git_remote_add", REPO, params, GitResult.ok())

        assert not response.is_error
        assert response.text == (
            "Successfully added remote 'upstream' with URL 'https://example.com/org/repo.git'"
        )

    def test_remote_list_empty(self):
        response = format_response(
            "git_remote_list", REPO, GitRemoteList(path=REPO), GitResult.ok([])
        )

        assert response.text == f"No remotes found in repository at: {REPO}"
        assert not response.is_error

    def test_remote_list_without_url(self):
        remotes = [RemoteInfo(name="stale", fetch_url="", push_url="")]

        response = format_response(
            "git_remote_list", REPO, GitRemoteList(path=REPO), GitResult.ok(remotes)
        )

        assert response.text.endswith("stale\n  fetch: (none)\n  push: (none)")

    def test_remote_list_preserves_order(self):
        remotes = [
            RemoteInfo(name="origin", fetch_url="https://a.example/r.git", push_url="https://a.example/r.git"),
            RemoteInfo(name="upstream", fetch_url="https://b.example/r.git", push_url="ssh://git@b.example/r.git"),
        ]

        response = format_response(
            "git_remote_list", REPO, GitRemoteList(path=REPO), GitResult.ok(remotes)
        )

        assert response.text == (
            f"Remotes in repository at: {REPO}\n"
            "\n"
            "origin\n"
            "  fetch: https://a.example/r.git\n"
            "  push: https://a.example/r.git\n"
            "\n"
            "upstream\n"
            "  fetch: https://b.example/r.git\n"
            "  push: ssh://git@b.example/r.git"
        )
        assert response.text.index("origin") < response.text.index("upstream")

    def test_fetch_echoes_default_remote(self):
        response = format_response("git_fetch", REPO, GitFetch(path=REPO), GitResult.ok())

        assert response.text == "Successfully fetched from remote 'origin'"

    def test_fetch_with_branch(self):
        params = GitFetch(path=REPO, remote="upstream", branch="main")

        response = format_response("git_fetch", REPO, params, GitResult.ok())

        assert response.text == "Successfully fetched from remote 'upstream' branch 'main'"

    def test_pull_from_tracking_branch(self):
        response = format_response("git_pull", REPO, GitPull(path=REPO), GitResult.ok())

        assert response.text == "Successfully pulled changes from upstream tracking branch"

    def test_pull_with_everything(self):
        params = GitPull(path=REPO, remote="origin", branch="dev", rebase=True)

        response = format_response("git_pull", REPO, params, GitResult.ok())

        assert response.text == (
            "Successfully pulled changes from remote 'origin' branch 'dev' with rebase"
        )

    def test_pull_branch_only(self):
        params = GitPull(path=REPO, branch="dev")

        response = format_response("git_pull", REPO, params, GitResult.ok())

        assert response.text == "Successfully pulled changes branch 'dev'"

    def test_push_plain(self):
        response = format_response("git_push", REPO, GitPush(path=REPO), GitResult.ok())

        assert response.text == "Successfully pushed changes to remote 'origin'"

    def test_push_flags(self):
        params = GitPush(path=REPO, branch="feature", force=True, setUpstream=True)

        response = format_response("git_push", REPO, params, GitResult.ok())

        assert response.text == (
            "Successfully pushed changes to remote 'origin' branch 'feature'"
            " (force push) (set upstream)"
        )


class TestErrorRendering:
    def test_failure_carries_message_and_flag(self):
        result = GitResult.fail(ErrorKind.NOT_A_REPOSITORY, f"Not a Git repository: {REPO}")

        response = format_response("git_fetch", REPO, GitFetch(path=REPO), result)

        assert response.is_error
        assert response.text == f"Error: Not a Git repository: {REPO}"

    def test_failure_without_params(self):
        result = GitResult.fail(ErrorKind.VALIDATION_ERROR, "bad input")

        response = format_response("git_push", REPO, None, result)

        assert response.texts == ["Error: bad input"]

    def test_error_response_helper(self):
        response = error_response("boom")

        assert response == ToolResponse(texts=["Error: boom"], is_error=True)


class TestToolResponse:
    def test_to_call_tool_result(self):
        result = ToolResponse(texts=["first", "second"]).to_call_tool_result()

        assert result.isError is False
        assert [item.text for item in result.content] == ["first", "second"]
        assert all(item.type == "text" for item in result.content)

    def test_error_flag_propagates(self):
        result = error_response("nope").to_call_tool_result()

        assert result.isError is True
        assert result.content[0].text == "Error: nope"
