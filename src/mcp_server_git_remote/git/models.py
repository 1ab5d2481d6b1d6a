"""Pydantic models for Git remote operations"""

import re
from typing import Any, Optional

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

DEFAULT_REMOTE = "origin"

_URL_ADAPTER = TypeAdapter(AnyUrl)

# user@host:path, the scp-like syntax git accepts for ssh remotes
_SCP_LIKE_URL = re.compile(r"^[A-Za-z0-9._-]+@[A-Za-z0-9.-]+:(?!//)\S+$")

_FORBIDDEN_NAME_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")

# Characters git check-ref-format refuses; ":" and a leading "+" would turn the
# branch into a refspec
_FORBIDDEN_REF_CHARS = re.compile(r"[~^:?*\[\\]")


def is_valid_remote_url(url: str) -> bool:
    """Check that a remote URL is syntactically valid"""
    if not url or url.startswith("-") or _FORBIDDEN_NAME_CHARS.search(url):
        return False
    if _SCP_LIKE_URL.match(url):
        return True
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError:
        return False
    return True


def _check_name(value: str, what: str) -> str:
    if not value:
        raise ValueError(f"{what} name is required")
    if value.startswith("-"):
        raise ValueError(f"{what} name must not start with '-'")
    if _FORBIDDEN_NAME_CHARS.search(value):
        raise ValueError(f"{what} name must not contain whitespace or control characters")
    return value


def _check_branch(value: str) -> str:
    """Accept only a plain branch name, never a refspec."""
    _check_name(value, "Branch")
    if value.startswith("+") or _FORBIDDEN_REF_CHARS.search(value):
        raise ValueError(
            f"Branch name '{value}' must be a plain branch name, not a refspec"
        )
    parts = value.split("/")
    if (
        value == "@"
        or ".." in value
        or "@{" in value
        or value.endswith(".")
        or any(not part or part.startswith(".") or part.endswith(".lock") for part in parts)
    ):
        raise ValueError(f"Invalid branch name '{value}'")
    return value


def _blank_to(value: Any, default: Optional[str]) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return value


class RemoteInfo(BaseModel):
    """One configured remote as reported by the repository"""

    name: str
    fetch_url: str
    push_url: str


class GitRemoteAdd(BaseModel):
    path: str = Field(min_length=1, description="Path to the Git repository")
    name: str = Field(description="Name for the remote repository (e.g., 'origin')")
    url: str = Field(description="URL of the remote repository")

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _check_name(value, "Remote")

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        if not is_valid_remote_url(value):
            raise ValueError("Invalid URL format")
        return value


class GitRemoteList(BaseModel):
    path: str = Field(min_length=1, description="Path to the Git repository")


class GitFetch(BaseModel):
    path: str = Field(min_length=1, description="Path to the Git repository")
    remote: str = Field(
        default=DEFAULT_REMOTE,
        description="Name of the remote to fetch from (defaults to 'origin')",
    )
    branch: Optional[str] = Field(
        default=None,
        description="Specific branch to fetch (fetches all branches if omitted)",
    )

    @field_validator("remote", mode="before")
    @classmethod
    def _default_remote(cls, value: Any) -> Any:
        return _blank_to(value, DEFAULT_REMOTE)

    @field_validator("branch", mode="before")
    @classmethod
    def _blank_branch(cls, value: Any) -> Any:
        return _blank_to(value, None)

    @field_validator("remote")
    @classmethod
    def _validate_remote(cls, value: str) -> str:
        return _check_name(value, "Remote")

    @field_validator("branch")
    @classmethod
    def _validate_branch(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_branch(value)


class GitPull(BaseModel):
    path: str = Field(min_length=1, description="Path to the Git repository")
    remote: Optional[str] = Field(
        default=None,
        description="Name of the remote to pull from (defaults to the upstream of the current branch)",
    )
    branch: Optional[str] = Field(
        default=None,
        description="Branch to pull from (defaults to current tracking branch)",
    )
    rebase: bool = Field(
        default=False,
        description="Whether to use rebase instead of merge when pulling",
    )

    @field_validator("remote", "branch", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return _blank_to(value, None)

    @field_validator("remote")
    @classmethod
    def _validate_remote(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_name(value, "Remote")

    @field_validator("branch")
    @classmethod
    def _validate_branch(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_branch(value)


class GitPush(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(min_length=1, description="Path to the Git repository")
    remote: str = Field(
        default=DEFAULT_REMOTE,
        description="Name of the remote to push to (defaults to 'origin')",
    )
    branch: Optional[str] = Field(
        default=None,
        description="Branch to push (defaults to current branch)",
    )
    force: bool = Field(
        default=False,
        description="Force push changes, overwriting remote history",
    )
    set_upstream: bool = Field(
        default=False,
        alias="setUpstream",
        description="Set upstream tracking for the branch being pushed",
    )

    @field_validator("remote", mode="before")
    @classmethod
    def _default_remote(cls, value: Any) -> Any:
        return _blank_to(value, DEFAULT_REMOTE)

    @field_validator("branch", mode="before")
    @classmethod
    def _blank_branch(cls, value: Any) -> Any:
        return _blank_to(value, None)

    @field_validator("remote")
    @classmethod
    def _validate_remote(cls, value: str) -> str:
        return _check_name(value, "Remote")

    @field_validator("branch")
    @classmethod
    def _validate_branch(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_branch(value)
