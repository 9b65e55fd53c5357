import time
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from portfolio.config import settings
from portfolio.errors import UpstreamTransientError
from portfolio.utils.logger import logger

GITHUB_API_URL = "https://api.github.com"


class GitHubStatsService:
    """Profile + recent repositories for the GitHub section, cached in memory.

    A failed refresh serves the last good payload marked ``stale``.
    """
    def __init__(
        self,
        username: Optional[str] = None,
        token: Optional[str] = None,
        cache_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.username = username or settings.GITHUB_USERNAME
        self.token = token or settings.GITHUB_TOKEN
        self.cache_seconds = cache_seconds if cache_seconds is not None else settings.GITHUB_CACHE_SECONDS
        self._transport = transport
        self._clock = clock
        self._cached: Optional[Dict[str, Any]] = None
        self._cached_at = 0.0

        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "Portfolio-Website",
        }
        # A token only raises GitHub's rate limit
        if self.token:
            self.headers["Authorization"] = f"token {self.token}"

    async def get_stats(self) -> Dict[str, Any]:
        now = self._clock()
        if self._cached is not None and now - self._cached_at < self.cache_seconds:
            return self._cached

        try:
            data = await self._fetch()
        except Exception as e:
            logger.error(f"GitHub API error: {str(e)}")
            if self._cached is not None:
                return {**self._cached, "stale": True}
            raise UpstreamTransientError("Failed to fetch GitHub data") from e

        self._cached = data
        self._cached_at = now
        return data

    async def _fetch(self) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=GITHUB_API_URL, headers=self.headers, transport=self._transport, timeout=10.0
        ) as client:
            user_response = await client.get(f"/users/{self.username}")
            user_response.raise_for_status()
            user = user_response.json()

            repos_response = await client.get(
                f"/users/{self.username}/repos", params={"sort": "updated", "per_page": 6}
            )
            repos_response.raise_for_status()
            repos: List[Dict[str, Any]] = repos_response.json()

        return build_stats_payload(user, repos)


def build_stats_payload(user: Dict[str, Any], repos: List[Dict[str, Any]]) -> Dict[str, Any]:
    languages = Counter(repo["language"] for repo in repos if repo.get("language"))

    return {
        "user": {
            "login": user.get("login"),
            "name": user.get("name"),
            "avatarUrl": user.get("avatar_url"),
            "profileUrl": user.get("html_url"),
            "publicRepos": user.get("public_repos", 0),
            "followers": user.get("followers", 0),
            "following": user.get("following", 0),
            "bio": user.get("bio"),
        },
        "repos": [
            {
                "name": repo.get("name"),
                "description": repo.get("description"),
                "url": repo.get("html_url"),
                "stars": repo.get("stargazers_count", 0),
                "forks": repo.get("forks_count", 0),
                "language": repo.get("language"),
                "updatedAt": repo.get("updated_at"),
            }
            for repo in repos
        ],
        "stats": {
            "totalStars": sum(repo.get("stargazers_count", 0) for repo in repos),
            "totalForks": sum(repo.get("forks_count", 0) for repo in repos),
            "topLanguages": [
                {"language": lang, "count": count} for lang, count in languages.most_common(5)
            ],
        },
        "fetchedAt": datetime.now(timezone.utc).isoformat(),
    }
