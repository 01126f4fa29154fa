ARCHIVE_ERROR_MESSAGE = "ERROR: CONNECTION SEVERED. ARCHIVE ACCESSIBILITY DENIED."


class IncompleteCase(ValueError):
    """A required case parameter is blank; generation may not start."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing case parameters: {', '.join(self.missing)}")


class GenerationInProgress(RuntimeError):
    """A generation is already streaming for this case file."""


class ArchiveUnavailable(RuntimeError):
    """The remote model failed while connecting or streaming."""


class ConfigurationError(ArchiveUnavailable):
    """No credential was configured for the archive client."""
