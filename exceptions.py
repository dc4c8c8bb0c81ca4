from typing import Optional


class GitHubAnalyticsError(Exception):
    status_code: int = 500
    public_message: str = "Failed to fetch data from GitHub"


class InvalidQueryError(GitHubAnalyticsError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class NotFound(GitHubAnalyticsError):
    status_code = 404
    public_message = "User not found"


class RateLimited(GitHubAnalyticsError):
    status_code = 429
    public_message = "Rate limit exceeded. Please add a GitHub Personal Access Token."


class UpstreamError(GitHubAnalyticsError):
    status_code = 500

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
