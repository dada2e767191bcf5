"""Tests for webhook payload classification."""

import json

import pytest

from ghslack_core.errors import IncompleteEventError
from ghslack_core.events import (
    IssueClosed,
    IssueCommentCreated,
    IssueOpened,
    PullRequestClosed,
    PullRequestMerged,
    PullRequestReviewCommentCreated,
    load_event,
    parse_event,
)
from ghslack_store.models import IssueRef

SENDER = {"login": "alice", "avatar_url": "https://avatars/alice", "html_url": "https://github.com/alice"}
REPOSITORY = {"full_name": "octo/widgets"}


def _issue(number=7, pull_request=None):
    issue = {"number": number, "title": "Crash on save", "html_url": f"https://github.com/octo/widgets/issues/{number}",
             "body": "It crashes"}
    if pull_request is not None:
        issue["pull_request"] = pull_request
    return issue


def _pr(number=9, merged=False):
    return {"number": number, "title": "Fix crash", "html_url": f"https://github.com/octo/widgets/pull/{number}",
            "body": "Fixes #7", "merged": merged}


def _payload(action, **objects):
    return {"action": action, "sender": SENDER, "repository": REPOSITORY, **objects}


class TestIssues:
    def test_opened(self):
        event = parse_event("issues", _payload("opened", issue=_issue()))
        assert isinstance(event, IssueOpened)
        assert event.actor.login == "alice"
        assert event.target.ref == IssueRef(owner="octo", repo="widgets", number=7, kind="issue")
        assert event.target.title == "Crash on save"
        assert event.body == "It crashes"

    def test_closed(self):
        assert isinstance(parse_event("issues", _payload("closed", issue=_issue())), IssueClosed)

    def test_null_body_becomes_empty_string(self):
        issue = _issue()
        issue["body"] = None
        assert parse_event("issues", _payload("opened", issue=issue)).body == ""

    def test_reopened_is_ignored(self):
        assert parse_event("issues", _payload("reopened", issue=_issue())) is None

    def test_issue_without_number_raises(self):
        issue = _issue()
        del issue["number"]
        with pytest.raises(IncompleteEventError, match="number"):
            parse_event("issues", _payload("opened", issue=issue))

    def test_missing_issue_raises(self):
        with pytest.raises(IncompleteEventError, match="issue"):
            parse_event("issues", _payload("opened"))


class TestPullRequests:
    def test_opened_maps_to_issue_opened_with_pr_kind(self):
        event = parse_event("pull_request", _payload("opened", pull_request=_pr()))
        assert isinstance(event, IssueOpened)
        assert event.target.kind == "pull_request"
        assert event.target.label == "pull request"

    def test_closed_without_merge(self):
        event = parse_event("pull_request", _payload("closed", pull_request=_pr(merged=False)))
        assert isinstance(event, PullRequestClosed)

    def test_closed_with_merge(self):
        event = parse_event("pull_request", _payload("closed", pull_request=_pr(merged=True)))
        assert isinstance(event, PullRequestMerged)

    def test_synchronize_is_ignored(self):
        assert parse_event("pull_request", _payload("synchronize", pull_request=_pr())) is None


class TestComments:
    def test_issue_comment(self):
        comment = {"id": 555, "body": "Same here", "html_url": "https://github.com/c/555"}
        event = parse_event("issue_comment", _payload("created", issue=_issue(), comment=comment))
        assert isinstance(event, IssueCommentCreated)
        assert event.comment_id == 555
        assert event.comment_url == "https://github.com/c/555"
        assert event.target.kind == "issue"

    def test_issue_comment_on_pull_request(self):
        comment = {"id": 1, "body": "LGTM"}
        payload = _payload("created", issue=_issue(pull_request={"url": "x"}), comment=comment)
        event = parse_event("issue_comment", payload)
        assert event.target.kind == "pull_request"

    def test_review_comment(self):
        comment = {"id": 777, "body": "nit: rename"}
        event = parse_event("pull_request_review_comment", _payload("created", pull_request=_pr(), comment=comment))
        assert isinstance(event, PullRequestReviewCommentCreated)
        assert event.target.number == 9
        assert event.comment_id == 777

    def test_missing_comment_raises(self):
        with pytest.raises(IncompleteEventError, match="comment"):
            parse_event("issue_comment", _payload("created", issue=_issue()))

    def test_comment_without_id_raises(self):
        payload = _payload("created", issue=_issue(), comment={"body": "hi"})
        with pytest.raises(IncompleteEventError, match="contain a id"):
            parse_event("issue_comment", payload)

    def test_review_comment_without_id_raises(self):
        payload = _payload("created", pull_request=_pr(), comment={"body": "nit"})
        with pytest.raises(IncompleteEventError, match="contain a id"):
            parse_event("pull_request_review_comment", payload)

    def test_edited_comment_is_ignored(self):
        comment = {"id": 1, "body": "x"}
        assert parse_event("issue_comment", _payload("edited", issue=_issue(), comment=comment)) is None


def test_missing_sender_raises():
    payload = {"action": "opened", "repository": REPOSITORY, "issue": _issue()}
    with pytest.raises(IncompleteEventError, match="sender"):
        parse_event("issues", payload)


def test_unknown_event_is_ignored():
    assert parse_event("push", {"ref": "refs/heads/main"}) is None


def test_load_event_reads_payload_file(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(_payload("opened", issue=_issue(number=3))))
    event = load_event("issues", str(path))
    assert event.target.number == 3
