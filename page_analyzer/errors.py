class PageAnalyzerError(Exception):
    """Base class for every error the analyzer reports to its callers."""


class ValidationError(PageAnalyzerError):
    """The submitted address cannot be turned into a canonical URL."""


class FetchError(PageAnalyzerError):
    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = f"Failed to fetch {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StorageError(PageAnalyzerError):
    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        message = f"Storage operation '{operation}' failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NotFoundError(PageAnalyzerError):
    def __init__(self, url_id: int):
        self.url_id = url_id
        super().__init__(f"URL with id {url_id} does not exist")


# Errors a check request can end with.
CheckError = (NotFoundError, FetchError, StorageError)
