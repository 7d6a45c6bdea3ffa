class WeeksheetError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UploadRejectedError(WeeksheetError):
    """Upload is too large, of an unsupported type, or lacks an employee name."""


class ConfigurationError(WeeksheetError):
    """Provider or credentials are missing or unknown."""


class ExtractionError(WeeksheetError):
    """The AI provider failed or returned something that is not JSON."""
