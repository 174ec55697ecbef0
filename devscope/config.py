import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# Environment variable names
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_MODEL_API_KEYS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
ENV_MODEL = "DEVSCOPE_MODEL"

# GitHub REST API
GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_ACCEPT_HEADER = "application/vnd.github.v3+json"
GITHUB_REPOS_PER_PAGE = 6
GITHUB_REQUEST_TIMEOUT_SECONDS = 15.0
USER_ENDPOINT_TEMPLATE = "/users/{handle}"
REPOS_ENDPOINT_TEMPLATE = "/users/{handle}/repos?sort=updated&per_page={per_page}&type=owner"
README_ENDPOINT_TEMPLATE = "/repos/{owner}/{repo}/readme"

# README excerpts
README_FETCH_COUNT = 3
README_MAX_CHARS = 2000
PROMPT_README_MAX_CHARS = 1500
NO_README_SENTINEL = "No README content available."

# Public contributions calendar (no auth)
CONTRIBUTIONS_API_URL = "https://github-contributions-api.jogruber.de/v4/{handle}"

# Model service
DEFAULT_MODEL = "google-gla:gemini-2.5-flash"
ASSESSMENT_TEMPERATURE = 0.2
MAX_PROMPT_REPOS = 6


def get_github_token() -> Optional[str]:
    return os.getenv(ENV_GITHUB_TOKEN) or None


def get_model_api_key() -> Optional[str]:
    """Returns the first configured model credential, if any."""
    for name in ENV_MODEL_API_KEYS:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None


def get_default_model() -> str:
    return os.getenv(ENV_MODEL) or DEFAULT_MODEL
