import asyncio
import base64
import logging
from typing import Any, List, Optional
from urllib.parse import urlparse
import httpx
from pydantic import TypeAdapter, ValidationError
from devscope.config import (
    GITHUB_API_ACCEPT_HEADER,
    GITHUB_API_BASE_URL,
    GITHUB_REPOS_PER_PAGE,
    GITHUB_REQUEST_TIMEOUT_SECONDS,
    README_ENDPOINT_TEMPLATE,
    README_FETCH_COUNT,
    README_MAX_CHARS,
    REPOS_ENDPOINT_TEMPLATE,
    USER_ENDPOINT_TEMPLATE,
    get_github_token,
)
from devscope.errors import EmptyPortfolio, NotFound, RateLimited, UpstreamError
from devscope.models.profile import Profile, ProfileData, Repository
from devscope.probes.contributions import ContributionProbe

logger = logging.getLogger(__name__)

_REPOS_ADAPTER = TypeAdapter(List[Repository])


async def fetch_json(client: httpx.AsyncClient, url: str, token: Optional[str] = None) -> Any:
    """
    GETs a GitHub REST resource and returns the decoded JSON body.
    Non-2xx responses are classified into RateLimited / NotFound / UpstreamError.
    """
    headers = {"Accept": GITHUB_API_ACCEPT_HEADER}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        raise UpstreamError(f"GitHub API Error: {e}") from e

    if not response.is_success:
        if response.status_code in (403, 429):
            raise RateLimited()
        if response.status_code == 404:
            raise NotFound()
        raise UpstreamError(f"GitHub API Error: {response.reason_phrase}", status_code=response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(f"GitHub API Error: invalid JSON from {url}", status_code=response.status_code) from e


def extract_username(raw: str) -> Optional[str]:
    """
    Accepts a handle, 'github.com/handle' or a full profile/repo URL and
    returns the handle.
    """
    clean = (raw or "").strip()
    if not clean:
        return None
    if "github.com" in clean:
        url = clean if clean.startswith("http") else f"https://{clean}"
        parts = [p for p in urlparse(url).path.split("/") if p]
        if parts:
            return parts[0]
    parts = [p for p in clean.split("/") if p]
    return parts[0] if parts else None


def decode_readme(payload: Any, max_chars: int = README_MAX_CHARS) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    content = payload.get("content")
    if payload.get("encoding") != "base64" or not isinstance(content, str) or not content:
        return None
    raw = base64.b64decode(content.replace("\n", ""))
    return raw.decode("utf-8", errors="replace")[:max_chars]


class GithubProbe:
    def __init__(
        self,
        token: Optional[str] = None,
        contributions: Optional[ContributionProbe] = None,
        base_url: str = GITHUB_API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token or get_github_token()
        self.contributions = contributions or ContributionProbe()
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def fetch_profile(self, handle: str) -> ProfileData:
        return asyncio.run(self.gather_profile(handle))

    async def gather_profile(self, handle: str) -> ProfileData:
        """
        Profile first, then repositories and contribution stats together,
        then README excerpts for the leading repositories together.
        Only the profile and repository fetches can fail the run.
        """
        async with httpx.AsyncClient(
            timeout=GITHUB_REQUEST_TIMEOUT_SECONDS,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            profile = await self.fetch_user(client, handle)
            logger.info("Fetched profile for %s", profile.login)

            # Both fetches are joined before a repository failure propagates
            repositories, stats = await asyncio.gather(
                self.fetch_repositories(client, handle),
                self.contributions.fetch_stats(client, handle),
                return_exceptions=True,
            )
            if isinstance(repositories, BaseException):
                raise repositories
            if not repositories:
                raise EmptyPortfolio()
            logger.info("Fetched %d repositories for %s", len(repositories), profile.login)

            head = repositories[:README_FETCH_COUNT]
            excerpts = await asyncio.gather(
                *(self.fetch_readme(client, profile.login, repo.name) for repo in head)
            )
            with_readmes = [
                repo.model_copy(update={"readme_excerpt": excerpt})
                for repo, excerpt in zip(head, excerpts)
            ]

        return ProfileData(
            profile=profile,
            repositories=with_readmes + repositories[README_FETCH_COUNT:],
            stats=stats,
        )

    async def fetch_user(self, client: httpx.AsyncClient, handle: str) -> Profile:
        data = await fetch_json(client, self._url(USER_ENDPOINT_TEMPLATE.format(handle=handle)), self.token)
        try:
            return Profile.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(f"Unexpected profile payload for {handle}") from e

    async def fetch_repositories(self, client: httpx.AsyncClient, handle: str) -> List[Repository]:
        path = REPOS_ENDPOINT_TEMPLATE.format(handle=handle, per_page=GITHUB_REPOS_PER_PAGE)
        data = await fetch_json(client, self._url(path), self.token)
        try:
            repositories = _REPOS_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise UpstreamError(f"Unexpected repository payload for {handle}") from e
        return repositories[:GITHUB_REPOS_PER_PAGE]

    async def fetch_readme(self, client: httpx.AsyncClient, owner: str, repo: str) -> Optional[str]:
        # 404 simply means the repository has no README
        url = self._url(README_ENDPOINT_TEMPLATE.format(owner=owner, repo=repo))
        try:
            return decode_readme(await fetch_json(client, url, self.token))
        except Exception as e:
            logger.debug("No README for %s/%s: %s", owner, repo, e)
            return None

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"
