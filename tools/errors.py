"""Errors raised while reading a cloud assembly and writing its diagrams."""


class ToolError(Exception):
    """Base class for cloud assembly tool errors."""

    def __init__(self, path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class ManifestReadError(ToolError):
    """The manifest or template file is missing or unreadable."""


class ManifestParseError(ToolError):
    """The file is not valid JSON or lacks the expected fields."""


class OutputWriteError(ToolError):
    """The rendered document could not be written."""
