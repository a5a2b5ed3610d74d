"""gitscribe exception hierarchy."""

from typing import Any


class ScribeError(Exception):
    """Base exception for all gitscribe errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(ScribeError):
    """Error in gitscribe configuration."""

    pass


class PlanError(ScribeError):
    """Invalid or unreadable history plan."""

    def __init__(
        self, message: str, step: int | None = None, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.step = step


class GitError(ScribeError):
    """Error in git operations."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code


class GitNotFoundError(GitError):
    """The git executable could not be found on PATH."""

    def __init__(self, executable: str) -> None:
        super().__init__(
            f"Git executable not found: {executable}",
            details={"executable": executable},
        )
        self.executable = executable


class RefNotFoundError(GitError):
    """A reference does not resolve to a commit."""

    def __init__(self, message: str, ref: str) -> None:
        super().__init__(message, details={"ref": ref})
        self.ref = ref


class NoHeadError(GitError):
    """HEAD does not point at a commit (empty repository)."""

    pass


class BranchExistsError(GitError):
    """Branch to be created already exists."""

    def __init__(self, message: str, branch: str) -> None:
        super().__init__(message, details={"branch": branch})
        self.branch = branch


class BranchNotFoundError(GitError):
    """Branch lookup found nothing."""

    def __init__(self, message: str, branch: str) -> None:
        super().__init__(message, details={"branch": branch})
        self.branch = branch


class OutputParseError(GitError):
    """Git produced output that does not match the expected format."""

    def __init__(self, message: str, raw_output: str, command: str | None = None) -> None:
        super().__init__(message, command=command, details={"raw_output": raw_output})
        self.raw_output = raw_output
