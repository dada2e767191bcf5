from __future__ import annotations

import logging

from github import Github

from ghslack_store.models import CommentDocument, IssueDocument, IssueRef

logger = logging.getLogger(__name__)

# Returns markdown `body` and rendered `body_html` in one response. The HTML
# carries the signed private-user-images URLs that the markdown source lacks.
FULL_MEDIA_TYPE = "application/vnd.github.full+json"


class GitHubIssueApi:
    """Issue, pull request and comment reads/updates used by the notifier.

    Reads go through the raw requester because PyGithub objects do not expose
    ``body_html``; updates use the regular PyGithub objects.
    """

    def __init__(self, token: str, gh: Github | None = None):
        self._gh = gh if gh is not None else Github(token)

    def _get_full(self, path: str) -> dict:
        _, data = self._gh.requester.requestJsonAndCheck("GET", path, headers={"Accept": FULL_MEDIA_TYPE})
        return data

    def get_issue(self, ref: IssueRef) -> IssueDocument:
        # Pull request bodies are served by the issues endpoint as well.
        data = self._get_full(f"/repos/{ref.owner}/{ref.repo}/issues/{ref.number}")
        return IssueDocument(
            body=data.get("body") or "",
            body_html=data.get("body_html") or "",
            author=(data.get("user") or {}).get("login", ""),
            author_avatar_url=(data.get("user") or {}).get("avatar_url", ""),
            title=data.get("title") or "",
            html_url=data.get("html_url") or "",
        )

    def update_issue_body(self, ref: IssueRef, body: str) -> None:
        repo = self._gh.get_repo(ref.full_name)
        if ref.is_pull_request:
            repo.get_pull(ref.number).edit(body=body)
        else:
            repo.get_issue(ref.number).edit(body=body)
        logger.debug("Updated body of %s", ref)

    def get_issue_comment(self, ref: IssueRef, comment_id: int) -> CommentDocument:
        return self._comment(self._get_full(f"/repos/{ref.owner}/{ref.repo}/issues/comments/{comment_id}"))

    def get_review_comment(self, ref: IssueRef, comment_id: int) -> CommentDocument:
        return self._comment(self._get_full(f"/repos/{ref.owner}/{ref.repo}/pulls/comments/{comment_id}"))

    @staticmethod
    def _comment(data: dict) -> CommentDocument:
        return CommentDocument(
            id=data["id"],
            body=data.get("body") or "",
            body_html=data.get("body_html") or "",
            author=(data.get("user") or {}).get("login", ""),
            html_url=data.get("html_url") or "",
        )
