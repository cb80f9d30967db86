import json
from typing import List, Tuple

from ..errors import CommandFailed, NotAuthenticated, NotInstalled, ParseFailure
from ..models import UNKNOWN, GitHubPayload, PullRequest
from .common import first_line, has_error, is_not_found, load_json, text

LOGIN_MARKERS = ("gh auth login", "not logged in")
MAX_PRS = 10


def parse_user(raw: str) -> dict:
    if is_not_found(raw):
        raise NotInstalled("GitHub CLI not found")
    if any(marker in raw for marker in LOGIN_MARKERS):
        raise NotAuthenticated("GitHub CLI not logged in")
    if not raw.strip():
        raise CommandFailed("GitHub CLI returned no output")
    if has_error(raw):
        raise CommandFailed(first_line(raw))

    data = load_json(raw, "GitHub user")
    if not isinstance(data, dict):
        raise ParseFailure("Failed to parse GitHub user")
    return {
        "login": text(data.get("login")) or UNKNOWN,
        "name": text(data.get("name")),
        "company": text(data.get("company")),
        "location": text(data.get("location")),
    }


def parse_prs(raw: str) -> Tuple[PullRequest, ...]:
    """Pull requests in API order. Unreadable output yields none."""
    try:
        data = json.loads(raw)
    except ValueError:
        return ()
    if not isinstance(data, list):
        return ()

    prs: List[PullRequest] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        title = item.get("title")
        repository = item.get("repository")
        if not isinstance(title, str) or not isinstance(repository, dict):
            continue
        repo_name = repository.get("name")
        if not isinstance(repo_name, str):
            continue
        prs.append(PullRequest(title=title, repo_name=repo_name))
        if len(prs) == MAX_PRS:
            break
    return tuple(prs)


def parse(user_raw: str, prs_raw: str) -> GitHubPayload:
    return GitHubPayload(**parse_user(user_raw), open_prs=parse_prs(prs_raw))
