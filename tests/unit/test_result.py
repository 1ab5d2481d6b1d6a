import pytest

from mcp_server_git_remote.error_handling import ErrorKind
from mcp_server_git_remote.git.result import GitError, GitResult


class TestGitResult:
    def test_ok_without_payload(self):
        result = GitResult.ok()

        assert result.success is True
        assert result.data is None
        assert result.error is None

    def test_ok_with_payload(self):
        result = GitResult.ok(["origin"])

        assert result.success is True
        assert result.data == ["origin"]
        assert result.error is None

    def test_fail_carries_kind_and_message(self):
        result = GitResult.fail(ErrorKind.REMOTE_EXISTS, "Remote 'origin' already exists")

        assert result.success is False
        assert result.data is None
        assert result.error == GitError(
            kind=ErrorKind.REMOTE_EXISTS, message="Remote 'origin' already exists"
        )

    def test_success_with_error_is_rejected(self):
        with pytest.raises(ValueError):
            GitResult(success=True, error=GitError(ErrorKind.IO_FAILURE, "boom"))

    def test_failure_without_error_is_rejected(self):
        with pytest.raises(ValueError):
            GitResult(success=False)

    def test_failure_with_data_is_rejected(self):
        with pytest.raises(ValueError):
            GitResult(
                success=False,
                data=[1],
                error=GitError(ErrorKind.IO_FAILURE, "boom"),
            )

    def test_result_is_immutable(self):
        result = GitResult.ok()
        with pytest.raises(AttributeError):
            result.success = False
