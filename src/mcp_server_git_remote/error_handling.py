"""Error taxonomy and classification for MCP Git Remote Server."""

import re
from enum import Enum
from typing import Any, Dict

from git import GitCommandError


class ErrorKind(str, Enum):
    """Classification of every failure a tool call can report."""

    # Caller input, never reaches the repository service
    VALIDATION_ERROR = "validation_error"
    # Repository probe failed
    NOT_A_REPOSITORY = "not_a_repository"

    # Failures reported by the repository service
    REMOTE_EXISTS = "remote_exists"
    INVALID_URL = "invalid_url"
    UNKNOWN_REMOTE = "unknown_remote"
    NETWORK_FAILURE = "network_failure"
    AUTH_FAILURE = "auth_failure"
    NO_UPSTREAM = "no_upstream"
    MERGE_CONFLICT = "merge_conflict"
    NON_FAST_FORWARD = "non_fast_forward"
    IO_FAILURE = "io_failure"

    TIMEOUT = "timeout"
    # Unexpected exception caught at the dispatcher boundary
    INTERNAL_FAULT = "internal_fault"


# Checked in order; the first matching marker wins.
_STDERR_MARKERS = (
    (
        ErrorKind.AUTH_FAILURE,
        (
            "authentication failed",
            "could not read username",
            "could not read password",
            "invalid username or password",
            "permission denied (publickey",
            "host key verification failed",
            "requested url returned error: 401",
            "requested url returned error: 403",
        ),
    ),
    (
        ErrorKind.NON_FAST_FORWARD,
        (
            "non-fast-forward",
            "fetch first",
            "updates were rejected",
            "[rejected]",
        ),
    ),
    (
        ErrorKind.MERGE_CONFLICT,
        (
            "conflict (",
            "automatic merge failed",
            "not possible to fast-forward",
            "need to specify how to reconcile",
            "divergent branches",
            "would be overwritten by merge",
            "could not apply",
        ),
    ),
    (
        ErrorKind.NO_UPSTREAM,
        (
            "no tracking information",
            "has no upstream branch",
            "did not specify a branch",
        ),
    ),
    (
        ErrorKind.REMOTE_EXISTS,
        ("already exists",),
    ),
    (
        ErrorKind.UNKNOWN_REMOTE,
        ("no such remote",),
    ),
    (
        ErrorKind.INVALID_URL,
        (
            "invalid url",
            "unsupported protocol",
            "unable to find remote helper",
        ),
    ),
    (
        ErrorKind.NETWORK_FAILURE,
        (
            "could not resolve host",
            "could not read from remote repository",
            "connection refused",
            "connection timed out",
            "operation timed out",
            "network is unreachable",
            "unable to access",
            "the remote end hung up",
            "does not appear to be a git repository",
            "couldn't find remote ref",
            "early eof",
        ),
    ),
)


# A quoted span opened after a non-letter; "couldn't" is not an opener
_QUOTED_SPAN = re.compile(r"(?<![A-Za-z])'[^'\n]*'")


def _unwrap_output(stream: str, label: str) -> str:
    # GitPython renders each stream as "\n  stderr: '...'"
    text = (stream or "").strip()
    if text.startswith(f"{label}:"):
        text = text[len(label) + 1:].strip()
        if len(text) >= 2 and text[0] == text[-1] == "'":
            text = text[1:-1]
    return text.strip()


def classify_git_error(error: Exception) -> ErrorKind:
    """
    Map a failed git invocation to an ErrorKind.

    Classification works on the text git produced. Quoted spans (paths, URLs
    and names echoed back from the caller) are removed first, so only git's
    own phrasing is matched. Anything not recognised is reported as an IO
    failure.
    """
    if isinstance(error, GitCommandError):
        text = "\n".join(
            (
                _unwrap_output(error.stderr, "stderr"),
                _unwrap_output(error.stdout, "stdout"),
            )
        )
    else:
        text = str(error)
    text = _QUOTED_SPAN.sub("''", text).lower()

    for kind, markers in _STDERR_MARKERS:
        if any(marker in text for marker in markers):
            return kind

    return ErrorKind.IO_FAILURE


def describe_git_error(error: Exception) -> str:
    """Condense a GitCommandError into the meaningful part of its stderr."""
    if isinstance(error, GitCommandError):
        stderr = _unwrap_output(error.stderr, "stderr")
        lines = [line.strip() for line in stderr.splitlines() if line.strip()]
        if lines:
            return " ".join(lines)
        return f"git exited with status {error.status}"
    return str(error)


# Error metrics tracking
_error_stats: Dict[str, Any] = {
    "total_errors": 0,
    "errors_by_kind": {},
    "errors_by_tool": {},
}


def record_error_metric(kind: ErrorKind, tool: str = "") -> None:
    """Record one failed tool call for monitoring."""
    _error_stats["total_errors"] += 1
    _error_stats["errors_by_kind"][kind.value] = (
        _error_stats["errors_by_kind"].get(kind.value, 0) + 1
    )
    if tool:
        _error_stats["errors_by_tool"][tool] = (
            _error_stats["errors_by_tool"].get(tool, 0) + 1
        )


def get_error_stats() -> Dict[str, Any]:
    """Get current error statistics."""
    return {
        "total_errors": _error_stats["total_errors"],
        "errors_by_kind": dict(_error_stats["errors_by_kind"]),
        "errors_by_tool": dict(_error_stats["errors_by_tool"]),
    }


def reset_error_stats() -> None:
    """Reset error statistics (useful for testing)."""
    global _error_stats
    _error_stats = {
        "total_errors": 0,
        "errors_by_kind": {},
        "errors_by_tool": {},
    }
