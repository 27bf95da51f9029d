"""Remote service clients."""

from testgen.clients.github import (
    GitHubAPIError,
    GitHubClient,
    PullRequest,
    RemoteRepository,
)

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "PullRequest",
    "RemoteRepository",
]
