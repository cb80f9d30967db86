import json

import pytest

from devdash.status.errors import CommandFailed, NotAuthenticated, NotInstalled, ParseFailure
from devdash.status.models import UNKNOWN
from devdash.status.parsers import github

USER = '{"login": "octo", "name": "Octo Cat", "company": null, "location": "Web"}'


def _prs(count: int) -> str:
    return json.dumps([
        {"title": f"PR {i}", "repository": {"name": f"repo-{i}"}} for i in range(count)
    ])


def test_parse_reads_user_and_prs() -> None:
    payload = github.parse(USER, _prs(2))

    assert payload.login == "octo"
    assert payload.name == "Octo Cat"
    assert payload.company == ""
    assert payload.location == "Web"
    assert [(pr.title, pr.repo_name) for pr in payload.open_prs] == [("PR 0", "repo-0"), ("PR 1", "repo-1")]


def test_open_prs_are_capped_at_ten() -> None:
    payload = github.parse(USER, _prs(15))

    assert len(payload.open_prs) == 10
    assert payload.open_prs[-1].title == "PR 9"


def test_unreadable_pr_list_yields_no_prs() -> None:
    assert github.parse(USER, "HTTP 502").open_prs == ()
    assert github.parse_prs('[{"title": "x"}, {"repository": {"name": "r"}}]') == ()


def test_null_login_reads_unknown() -> None:
    payload = github.parse('{"login": null}', "[]")

    assert payload.login == UNKNOWN


def test_empty_user_output_is_command_failure() -> None:
    with pytest.raises(CommandFailed) as exc:
        github.parse("", "[]")

    assert exc.value.message == "GitHub CLI returned no output"


def test_missing_binary_is_not_installed() -> None:
    with pytest.raises(NotInstalled):
        github.parse("zsh: command not found: gh", "")


@pytest.mark.parametrize("raw", [
    "To get started with GitHub CLI, please run:  gh auth login",
    "You are not logged in to any GitHub hosts.",
])
def test_login_prompt_is_not_authenticated(raw: str) -> None:
    with pytest.raises(NotAuthenticated):
        github.parse(raw, "")


def test_api_error_is_command_failure() -> None:
    with pytest.raises(CommandFailed):
        github.parse("HTTP 401: Bad credentials (Error)", "")


def test_non_object_user_is_parse_failure() -> None:
    with pytest.raises(ParseFailure):
        github.parse("[]", "")
