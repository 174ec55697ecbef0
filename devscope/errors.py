class DevscopeError(Exception):
    """Base class for failures that abort an analysis run."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RateLimited(DevscopeError):
    def __init__(self, message: str = "GitHub API rate limit exceeded. Please try again later or provide a token."):
        super().__init__(message)


class NotFound(DevscopeError):
    def __init__(self, message: str = "User or resource not found."):
        super().__init__(message)


class UpstreamError(DevscopeError):
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class EmptyPortfolio(DevscopeError):
    def __init__(self, message: str = "This user has no public repositories to analyze."):
        super().__init__(message)


class ConfigurationError(DevscopeError):
    pass


class AssessmentError(DevscopeError):
    pass
