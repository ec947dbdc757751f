class RasterizationError(Exception):
    """Raised when a multi-page document cannot be rendered to page images."""


class ExternalToolError(RasterizationError):
    """Raised when the external page-rendering tool fails.

    The message carries the tool's diagnostic output.
    """
