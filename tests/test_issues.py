"""Tests for Drupal.org issue patch resolution and selection."""

import logging

import pytest

from drupal_tasks.errors import FetchError, NoPatchesError, NotFoundError
from drupal_tasks.issues import IssueResolver, select_patch
from drupal_tasks.models import IssueDefinition

API = "https://www.drupal.org/api-d7"


def issue_url(issue_id):
    return f"{API}/node.json?nid={issue_id}&type=project_issue"


def mrs_url(issue_id):
    return f"{API}/node/{issue_id}.json?related_mrs=1"


def add_file(session, uri, name, url=None):
    session.add(f"{uri}.json", {"name": name, "url": url or f"https://u/{name}"})


def add_issue(session, issue_id, files, title="Broken thing"):
    session.add(issue_url(issue_id), {"list": [{"title": title, "field_issue_files": files}]})


class TestResolve:
    def test_single_patch_end_to_end(self, api, session):
        add_issue(session, 111, [{"display": 1, "file": {"uri": "f1"}}])
        session.add("f1.json", {"name": "x.patch", "url": "https://u/x.patch"})

        definition = IssueResolver(api).resolve(111)

        assert definition.issue_id == 111
        assert definition.title == "Broken thing"
        assert definition.patches == ["https://u/x.patch"]

    def test_only_displayed_files(self, api, session):
        files = [
            {"display": "1", "file": {"uri": "a"}},
            {"display": "0", "file": {"uri": "b"}},
            {"display": 1, "file": {"uri": "c"}},
            {"display": 0, "file": {"uri": "d"}},
        ]
        add_issue(session, 5, files)
        for uri in "abcd":
            add_file(session, uri, f"{uri}.patch")

        definition = IssueResolver(api).resolve(5)

        assert definition.patches == ["https://u/c.patch", "https://u/a.patch"]
        assert "b.json" not in session.requested
        assert "d.json" not in session.requested

    def test_capped_to_ten_most_recent(self, api, session):
        files = [{"display": 1, "file": {"uri": f"f{i}"}} for i in range(15)]
        add_issue(session, 6, files)
        for i in range(15):
            add_file(session, f"f{i}", f"{i}.patch")

        definition = IssueResolver(api).resolve(6)

        assert definition.patches == [f"https://u/{i}.patch" for i in range(14, 4, -1)]

    def test_skips_non_patch_and_incomplete_files(self, api, session):
        files = [
            {"display": 1, "file": {"uri": "img"}},
            {"display": 1, "file": {"uri": "nourl"}},
            {"display": 1, "file": {"uri": "broken"}},
            {"display": 1, "file": {"uri": "missing"}},
            {"display": 1},
            {"display": 1, "file": {"uri": "ok"}},
        ]
        add_issue(session, 7, files)
        add_file(session, "img", "screenshot.png")
        session.add("nourl.json", {"name": "y.patch"})
        session.add("broken.json", "<html>")
        add_file(session, "ok", "fix-7.patch")

        assert IssueResolver(api).resolve(7).patches == ["https://u/fix-7.patch"]

    def test_merge_requests_prepended_in_reverse(self, api, session):
        add_issue(session, 8, [{"display": 1, "file": {"uri": "f"}}])
        add_file(session, "f", "f.patch")
        session.add(mrs_url(8), {"related_mrs": ["https://git/mr/1", "https://git/mr/2"]})

        definition = IssueResolver(api).resolve(8)

        assert definition.patches == [
            "https://git/mr/2.patch",
            "https://git/mr/1.patch",
            "https://u/f.patch",
        ]

    def test_missing_issue_files_raises(self, api, session):
        session.add(issue_url(9), {"list": [{"title": "No files"}]})
        with pytest.raises(NoPatchesError, match="does not contain any patches"):
            IssueResolver(api).resolve(9)

    def test_null_issue_files_raises(self, api, session):
        session.add(issue_url(11), {"list": [{"title": "t", "field_issue_files": None}]})
        with pytest.raises(NoPatchesError):
            IssueResolver(api).resolve(11)

    def test_extension_only_name_is_a_patch(self, api, session):
        add_issue(session, 14, [{"display": 1, "file": {"uri": "dot"}}, {"display": 1, "file": {"uri": "bare"}}])
        add_file(session, "dot", ".patch")
        add_file(session, "bare", "patch")

        assert IssueResolver(api).resolve(14).patches == ["https://u/.patch"]

    def test_unreachable_attachment_logged_at_debug(self, api, session, caplog):
        add_issue(session, 15, [{"display": 1, "file": {"uri": "gone"}}])

        with caplog.at_level(logging.DEBUG, logger="drupal_tasks"):
            assert IssueResolver(api).resolve(15).patches == []

        failures = [r for r in caplog.records if "gone.json" in r.getMessage()]
        assert failures
        assert all(r.levelno == logging.DEBUG for r in failures)

    def test_empty_issue_files_is_empty_list(self, api, session):
        add_issue(session, 10, [])
        assert IssueResolver(api).resolve(10).patches == []

    def test_fetch_failure_raises(self, api):
        with pytest.raises(FetchError, match="Unable to fetch the Drupal issue for 12"):
            IssueResolver(api).resolve(12)

    def test_unknown_issue_raises(self, api, session):
        session.add(issue_url(13), {"list": []})
        with pytest.raises(NotFoundError):
            IssueResolver(api).resolve(13)


def pick(answers):
    answers = list(answers)
    asked = []

    def choose(question, choices, default):
        asked.append((question, list(choices), default))
        return answers.pop(0)

    choose.asked = asked
    return choose


class TestSelectPatch:
    def test_builds_selection(self):
        definition = IssueDefinition(issue_id=123, title="Title", patches=["https://x/y.patch", "https://x/z.patch"])
        choose = pick(["drupal/foo", "https://x/z.patch"])

        selection = select_patch(definition, ["drupal/foo", "drupal/bar"], choose)

        assert selection == {"drupal/foo": {"#123: Title": "https://x/z.patch"}}
        assert choose.asked[1][2] == "https://x/y.patch"

    @pytest.mark.parametrize(
        "definition",
        [
            IssueDefinition(issue_id=1, title=None, patches=["p"]),
            IssueDefinition(issue_id=None, title="t", patches=["p"]),
            IssueDefinition(issue_id=1, title="t", patches=None),
            IssueDefinition(issue_id=1, title="t", patches=[]),
        ],
    )
    def test_incomplete_definition_selects_nothing(self, definition):
        choose = pick([])
        assert select_patch(definition, ["drupal/foo"], choose) == {}
        assert choose.asked == []
