"""
Error types raised by tools and the inference client.

Tools raise these; the registry turns them into failed ToolResults so the
executor only ever sees presence or absence of an error. NetworkError from
inference is the one kind that escapes the agent loop.
"""


class ForgeError(Exception):
    """Base class for all Forge errors."""


class FileNotFound(ForgeError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class PatternNotFound(ForgeError):
    """Edit search text absent, or an invalid search/glob pattern."""


class CommandFailed(ForgeError):
    """Shell command could not be started or was killed."""


class UnknownTool(ForgeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ParseFailure(ForgeError):
    """Model reply could not be decoded into actions."""


class NetworkError(ForgeError):
    """Transport failure talking to the model API or the web."""
