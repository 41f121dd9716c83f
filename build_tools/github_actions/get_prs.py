#!/usr/bin/env python3

"""Extracts cross-repository PR references from a pull request description.

A PR that needs changes from other repositories to pass CI names them on lines
of the form

    Test with: seL4/seL4#123, https://github.com/seL4/l4v/pull/456 and seL4/sel4test#7

Both the short `org/repo#id` notation and the GitHub pull request URL are
accepted; every reference is normalised to `org/repo#id`. Separators are any
mix of commas, spaces and the word "and". Only lines that *start* with
"Test with" (or "test with", with or without a colon) are directives; anything
indented or preceded by other text is treated as ordinary prose.

----------
| Inputs |
----------

  Environment variables (read once at startup into a GitHubContext):
  * GITHUB_EVENT_NAME  : must be pull_request or pull_request_target.
  * GITHUB_EVENT_PATH  : path to the JSON event payload.
  * GITHUB_REPOSITORY  : owner/repo of the PR, used to fetch the current body.
  * GITHUB_TOKEN (optional)   : token for the GitHub API.
  * GITHUB_API_URL (optional) : defaults to https://api.github.com.

  Alternatively `--text` or `--file` parse the given text directly.

-----------
| Outputs |
-----------

  Written to stdout:
  * The space-separated list of references (empty line if there are none).

  Written to GITHUB_OUTPUT (if set):
  * prs : the same space-separated list.

Example usage:

    python get_prs.py --text "Test with: seL4/seL4#1234"
    python get_prs.py --self-test
"""

import argparse
from dataclasses import dataclass
import os
import re
import sys
from pathlib import Path
from typing import List, Mapping, Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

from github_actions.github_actions_utils import (
    gha_load_event,
    gha_query_pull_request,
    gha_set_output,
)
from github_actions.utils.constants import Constants
from github_actions.utils.exceptions import GitHubAPIError, GitHubEventError
from github_actions.utils.logger import log, set_log_level

# --------------------------------------------------------------------------- #
# Reference grammar
# --------------------------------------------------------------------------- #

_ORG_REPO = r"[a-zA-Z0-9_-]+/[a-zA-Z0-9_-]+"
_PR_ID = r"[0-9]+"

SHORT_REF_PATTERN = rf"(?P<org_repo>{_ORG_REPO})#(?P<pr_id>{_PR_ID})"
URL_REF_PATTERN = (
    rf"https://github\.com/(?P<url_org_repo>{_ORG_REPO})/pull/(?P<url_pr_id>{_PR_ID})"
)
REF_PATTERN = rf"(?:{SHORT_REF_PATTERN}|{URL_REF_PATTERN})"

# Same grammar without named groups, for embedding in the directive pattern.
_PLAIN_REF = rf"(?:{_ORG_REPO}#{_PR_ID}|https://github\.com/{_ORG_REPO}/pull/{_PR_ID})"
_SEPARATOR = r"(?:,| |and)+"

REF_RE = re.compile(REF_PATTERN)
DIRECTIVE_RE = re.compile(
    rf"[Tt]est with[:]?\s+(?P<refs>{_PLAIN_REF}(?:{_SEPARATOR}{_PLAIN_REF})*)"
)


@dataclass(frozen=True)
class Reference:
    """A pull request in some repository, in canonical `org/repo#id` form.

    `pr_id` stays the literal digit string from the input.
    """

    org_repo: str
    pr_id: str

    def __str__(self) -> str:
        return f"{self.org_repo}#{self.pr_id}"

    @classmethod
    def from_match(cls, match: "re.Match") -> "Reference":
        if match.group("org_repo") is not None:
            return cls(match.group("org_repo"), match.group("pr_id"))
        return cls(match.group("url_org_repo"), match.group("url_pr_id"))


def parse_reference(text: str) -> Optional[Reference]:
    """Parses a single reference in short or URL form, or returns None."""
    match = REF_RE.fullmatch(text)
    if match is None:
        return None
    return Reference.from_match(match)


def find_references(text: Optional[str]) -> List[Reference]:
    """Returns all references named on "Test with" lines, in order of appearance.

    Duplicates are kept. The directive must start at the first character of a
    line. Within the matched reference list every occurrence of the reference
    grammar is taken, without checking what sits between two occurrences, so
    odd inputs such as `org/a#1andorg/b#2` give whatever the scan finds. The
    reference list of a line ends at the first point where no separator plus
    reference follows; the rest of the line is ignored.
    """
    refs = []
    if not text:
        return refs

    for line in text.splitlines():
        directive = DIRECTIVE_RE.match(line)
        if directive is None:
            continue
        refs.extend(
            Reference.from_match(m) for m in REF_RE.finditer(directive.group("refs"))
        )
    return refs


def get_prs(text: Optional[str]) -> List[str]:
    """Like find_references, but returns the canonical strings."""
    return [str(ref) for ref in find_references(text)]


# Regression input: every line either contributes the listed org1NN reference
# or nothing. No org9NN reference may ever be returned.
SELF_TEST_INPUT = """\
This PR needs changes from the following PRs:
Test with: org101/repo101#101
test with: org102/repo102#102
Test with org103/repo103#103
Test with:   https://github.com/org104/repo104/pull/104
Test with: org105/repo105#105, org106/repo106#106
Test with: org107/repo107#107 and https://github.com/org108/repo108/pull/108
Test with: org109/repo109#109,, , and org110/repo110#110 and
 Test with: org901/repo901#901
Some text before Test with: org902/repo902#902
Test with: org111/repo111#111 and some trailing text org903/repo903#903
Test with: org112/repo112#112android org904/repo904#904
Test with: org113/repo113#113org905/repo905#905
Test with: org114/repo114#114andorg906
Test with: org115/repo115#115, org116/repo116#116, and, org117/repo117#117
Test with:org907/repo907#907
Test with: org118/repo118#118 org_118/repo#x
TEST WITH: org908/repo908#908
"""

SELF_TEST_EXPECTED = [f"org{n}/repo{n}#{n}" for n in range(101, 119)]


def self_test() -> bool:
    result = get_prs(SELF_TEST_INPUT)
    if result == SELF_TEST_EXPECTED:
        log.info(f"Self test passed ({len(result)} references)")
        return True
    log.error("Self test failed")
    log.error(f"  expected: {' '.join(SELF_TEST_EXPECTED)}")
    log.error(f"  got:      {' '.join(result)}")
    return False


# --------------------------------------------------------------------------- #
# Workflow invocation
# --------------------------------------------------------------------------- #


@dataclass
class GitHubContext:
    """The parts of the workflow environment get_prs needs."""

    event_name: Optional[str] = None
    event_path: Optional[str] = None
    repository: Optional[str] = None
    token: Optional[str] = None
    api_url: str = Constants.DEFAULT_API_URL

    @classmethod
    def from_env(cls, env: Mapping[str, str] = os.environ) -> "GitHubContext":
        return cls(
            event_name=env.get(Constants.ENV_EVENT_NAME),
            event_path=env.get(Constants.ENV_EVENT_PATH),
            repository=env.get(Constants.ENV_REPOSITORY),
            token=env.get(Constants.ENV_TOKEN) or None,
            api_url=env.get(Constants.ENV_API_URL) or Constants.DEFAULT_API_URL,
        )

    @property
    def is_pull_request(self) -> bool:
        return self.event_name in Constants.PULL_REQUEST_EVENTS


def get_pr_body(context: GitHubContext) -> Optional[str]:
    """Returns the current description of the PR that triggered the workflow.

    The body is re-fetched from the API because the event payload holds the
    description as it was when the event fired. Without a repository the
    payload body is used as is.

    Raises:
        GitHubEventError: not a pull request event, or unusable event payload
        GitHubAPIError: the API query failed
    """
    if not context.is_pull_request:
        raise GitHubEventError(
            f"Not a pull request event (GITHUB_EVENT_NAME={context.event_name!r})"
        )

    event = gha_load_event(context.event_path)
    pull_request = event.get("pull_request")
    if not isinstance(pull_request, dict) or "number" not in pull_request:
        raise GitHubEventError("Event payload has no pull_request number")

    if not context.repository:
        log.warning(
            f"{Constants.ENV_REPOSITORY} not set, using PR body from the event payload"
        )
        return pull_request.get("body")

    pr = gha_query_pull_request(
        context.repository,
        pull_request["number"],
        token=context.token,
        api_url=context.api_url,
    )
    return pr.get("body")


def main(argv: List[str], context: Optional[GitHubContext] = None) -> int:
    p = argparse.ArgumentParser(
        prog="get_prs.py",
        description="Print the PRs named on 'Test with:' lines of a PR description",
    )
    source = p.add_mutually_exclusive_group()
    source.add_argument(
        "--text", type=str, help="Parse this text instead of the workflow's PR body"
    )
    source.add_argument(
        "--file", type=str, help="Parse the contents of this file ('-' for stdin)"
    )
    source.add_argument(
        "--self-test",
        action="store_true",
        help="Check the parser against its built-in regression input",
    )
    p.add_argument(
        "--log-level",
        type=str,
        default=Constants.DEFAULT_LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    p.add_argument("--log-file", type=str, help="Also write the log to this file")
    args = p.parse_args(argv)

    set_log_level(args.log_level)
    if args.log_file:
        log.enable_file_logging(args.log_file)

    if args.self_test:
        return Constants.EXIT_SUCCESS if self_test() else Constants.EXIT_FAILURE

    if args.text is not None:
        body = args.text
    elif args.file == "-":
        body = sys.stdin.read()
    elif args.file:
        body = Path(args.file).read_text(encoding="utf-8")
    else:
        if context is None:
            context = GitHubContext.from_env()
        try:
            body = get_pr_body(context)
        except (GitHubEventError, GitHubAPIError) as e:
            log.error(str(e))
            return Constants.EXIT_FAILURE

    prs = " ".join(get_prs(body))
    log.debug(f"Found PR references: {prs or '(none)'}")
    print(prs)
    if args.text is None and args.file is None:
        gha_set_output({"prs": prs})
    return Constants.EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
