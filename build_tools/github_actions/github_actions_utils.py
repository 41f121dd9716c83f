"""Utilities for scripts running inside GitHub Actions workflows.

Covers the runtime files GitHub Actions hands to a step (GITHUB_OUTPUT,
GITHUB_ENV, GITHUB_STEP_SUMMARY, GITHUB_EVENT_PATH), log grouping, and small
GitHub REST API queries.

Tokens and repository names are always passed in by the caller; nothing here
reads credentials from the environment on its own.
"""

from contextlib import contextmanager
import json
import os
from pathlib import Path
from typing import Mapping, Optional, Union

import requests

from github_actions.utils.constants import Constants
from github_actions.utils.exceptions import GitHubAPIError, GitHubEventError
from github_actions.utils.logger import log


def _append_to_env_file(env_var: str, text: str) -> bool:
    file_path = os.getenv(env_var)
    if not file_path:
        log.warning(f"{env_var} env var not set, skipping write of: {text.strip()}")
        return False
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(text)
    return True


def gha_set_env(vars: Mapping[str, Union[str, Path]]) -> bool:
    """Sets environment variables for subsequent workflow steps."""
    return _append_to_env_file(
        Constants.ENV_ENV, "".join(f"{k}={str(v)}\n" for k, v in vars.items())
    )


def gha_set_output(vars: Mapping[str, Union[str, Path]]) -> bool:
    """Sets values in a step's output parameters."""
    return _append_to_env_file(
        Constants.ENV_OUTPUT, "".join(f"{k}={str(v)}\n" for k, v in vars.items())
    )


def gha_append_step_summary(summary: str) -> bool:
    """Appends a string to the GitHub Actions job summary (markdown)."""
    return _append_to_env_file(Constants.ENV_STEP_SUMMARY, summary + "\n")


@contextmanager
def gha_group(title: str):
    """Wraps everything printed inside the block in a collapsible log group."""
    print(f"::group::{title}", flush=True)
    try:
        yield
    finally:
        print("::endgroup::", flush=True)


def gha_load_event(event_path: Optional[str]) -> dict:
    """Reads the JSON event payload of the workflow run.

    Raises:
        GitHubEventError: if the path is missing or the payload is not valid JSON
    """
    if not event_path:
        raise GitHubEventError(f"{Constants.ENV_EVENT_PATH} is not set")
    try:
        with open(event_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise GitHubEventError(f"Cannot read event payload {event_path}: {e}")
    except json.JSONDecodeError as e:
        raise GitHubEventError(f"Event payload {event_path} is not valid JSON: {e}")


def gha_send_request(
    url: str, token: Optional[str] = None, timeout: int = Constants.DEFAULT_API_TIMEOUT
) -> object:
    """Sends a GET request to the GitHub REST API and returns the decoded JSON.

    Raises:
        GitHubAPIError: on connection failure or any non-200 response
    """
    headers = {
        "Accept": Constants.API_ACCEPT_HEADER,
        "X-GitHub-Api-Version": Constants.API_VERSION,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    log.debug(f"Requesting: {url}")
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise GitHubAPIError(f"Request to {url} failed: {e}")

    if response.status_code == Constants.HTTP_FORBIDDEN:
        raise GitHubAPIError(
            f"Access denied (403 Forbidden) for {url}. "
            "Check the token permissions or the API rate limit.",
            status_code=response.status_code,
        )
    if response.status_code != Constants.HTTP_OK:
        raise GitHubAPIError(
            f"Received unexpected status code {response.status_code} for {url}: "
            f"{response.text}",
            status_code=response.status_code,
        )
    return response.json()


def gha_query_pull_request(
    github_repository: str,
    pr_number: int,
    token: Optional[str] = None,
    api_url: str = Constants.DEFAULT_API_URL,
) -> dict:
    """Fetches the pull request object, e.g. to read its current body."""
    url = f"{api_url.rstrip('/')}/repos/{github_repository}/pulls/{pr_number}"
    return gha_send_request(url, token=token)
