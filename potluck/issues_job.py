"""Batch job: aggregate labelled GitHub issues into the static dishes file."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Iterable

import requests

from potluck.aggregate import sort_by_created, to_json
from potluck.config import (
    GITHUB_API_URL,
    GITHUB_REPOSITORY,
    GITHUB_TOKEN,
    HTTP_TIMEOUT_SECONDS,
    ISSUE_LABEL,
    ISSUES_PAGE_SIZE,
    OUTPUT_PATH,
)
from potluck.errors import ParseSkipped, SourceUnavailable
from potluck.logging_utils import get_logger, init_logging
from potluck.models import DishRecord
from potluck.normalize import from_text

logger = get_logger(__name__)


def list_issues(
    repo: str,
    token: str,
    *,
    label: str = ISSUE_LABEL,
    per_page: int = ISSUES_PAGE_SIZE,
    session: requests.Session | None = None,
    api_url: str = GITHUB_API_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> list[dict[str, Any]]:
    """Fetch every issue page until a short page comes back.

    All pages are collected before returning. Any failure raises
    SourceUnavailable and nothing partial is returned.
    """
    http = session or requests
    url = f"{api_url.rstrip('/')}/repos/{repo}/issues"
    headers = {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
    }

    issues: list[dict[str, Any]] = []
    page = 1
    while True:
        params: dict[str, Any] = {"state": "all", "per_page": per_page, "page": page}
        if label:
            params["labels"] = label
        try:
            resp = http.get(url, headers=headers, params=params, timeout=timeout)
        except requests.RequestException as exc:
            raise SourceUnavailable(f"GitHub issues request failed on page {page}: {exc}") from exc

        if not resp.ok:
            raise SourceUnavailable(
                f"GitHub API {resp.status_code} on page {page}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            batch = resp.json()
        except ValueError as exc:
            raise SourceUnavailable(f"GitHub API returned invalid JSON on page {page}") from exc
        if not isinstance(batch, list):
            raise SourceUnavailable(f"GitHub API returned a non-array page {page}")

        issues.extend(batch)
        logger.info(f"list_issues page={page} count={len(batch)}")
        if len(batch) < per_page:
            break
        page += 1

    return issues


def _label_names(issue: dict[str, Any]) -> set[str]:
    names: set[str] = set()
    for label in issue.get("labels") or []:
        if isinstance(label, dict):
            names.add(str(label.get("name", "")))
        else:
            names.add(str(label))
    return names


def issue_to_record(issue: dict[str, Any], *, label: str = ISSUE_LABEL) -> DishRecord:
    """Parse one issue. Raises ParseSkipped for anything that is not a sign-up."""
    number = issue.get("number")
    if "pull_request" in issue:
        raise ParseSkipped(f"#{number} is a pull request")
    if label and label not in _label_names(issue):
        raise ParseSkipped(f"#{number} is not labelled {label!r}")
    created_at = issue.get("created_at")
    if not isinstance(created_at, str) or not created_at.strip():
        raise ParseSkipped(f"#{number} has no created_at")

    record = from_text(
        issue.get("title") or "",
        issue.get("body") or "",
        source_id=f"issue_{number}",
        created_at=created_at,
    )
    if record is None:
        raise ParseSkipped(f"#{number} has no dish or guest name")
    return record


def records_from_issues(issues: Iterable[dict[str, Any]], *, label: str = ISSUE_LABEL) -> list[DishRecord]:
    records: list[DishRecord] = []
    for issue in issues:
        try:
            records.append(issue_to_record(issue, label=label))
        except ParseSkipped as exc:
            logger.debug(f"records_from_issues skipped {exc}")
    return sort_by_created(records)


def write_dishes(records: Iterable[DishRecord], output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(records) + "\n", encoding="utf-8")
    return path


def run_job(
    repo: str,
    token: str,
    output_path: str | Path = OUTPUT_PATH,
    *,
    label: str = ISSUE_LABEL,
    session: requests.Session | None = None,
) -> list[DishRecord]:
    """List, parse, sort and overwrite ``output_path``. Returns the written records."""
    issues = list_issues(repo, token, label=label, session=session)
    records = records_from_issues(issues, label=label)
    path = write_dishes(records, output_path)
    logger.info(f"run_job wrote={len(records)} issues={len(issues)} path={path}")
    return records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build the potluck dishes JSON from GitHub issues.")
    parser.add_argument("--repo", default=GITHUB_REPOSITORY, help="owner/name (default: $GITHUB_REPOSITORY)")
    parser.add_argument("--output", default=OUTPUT_PATH, help="output JSON path")
    parser.add_argument("--label", default=ISSUE_LABEL, help="issue label marking sign-ups")
    return parser


def main(argv: list[str] | None = None) -> int:
    init_logging()
    args = build_parser().parse_args(argv)

    if not args.repo or not GITHUB_TOKEN:
        print("GITHUB_REPOSITORY and GITHUB_TOKEN must be set", file=sys.stderr)
        return 2

    try:
        records = run_job(args.repo, GITHUB_TOKEN, args.output, label=args.label)
    except SourceUnavailable as exc:
        logger.error(f"main job aborted: {exc}")
        print(f"Failed to build dishes: {exc}", file=sys.stderr)
        return 1

    print(f"Wrote {len(records)} dishes to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
