from __future__ import annotations


class StageError(RuntimeError):
    """A phase failed. ``output`` holds whatever the failing tool printed."""

    def __init__(self, message: str, *, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class SetupFailure(StageError):
    pass


class TrustFailure(StageError):
    def __init__(self, message: str, *, directive: str, output: str = "") -> None:
        super().__init__(message, output=output)
        self.directive = directive


class RepoWriteFailure(StageError):
    pass


class MetadataRefreshFailure(StageError):
    pass


class DownloadFailure(StageError):
    ARTIFACT = "artifact"
    REPOSITORY = "repository"

    def __init__(self, message: str, *, kind: str, target: str, output: str = "") -> None:
        super().__init__(message, output=output)
        self.kind = kind
        self.target = target


class InstallFailure(StageError):
    def __init__(self, message: str, *, artifact: str, output: str = "") -> None:
        super().__init__(message, output=output)
        self.artifact = artifact
