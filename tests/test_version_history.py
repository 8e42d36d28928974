"""
Tests for the version history resolver
"""
from datetime import date

import pytest

from conftest import API, BASE_URL
from ecfr_stats.core.exceptions import VersionHistoryUnavailable
from ecfr_stats.history import VersionHistoryResolver

RENDERER = f"{BASE_URL}/api/renderer/v1/content/enhanced"


def version(identifier, substantive, amendment_date="2023-05-01", part=None, subpart=None):
    return {
        "date": amendment_date,
        "amendment_date": amendment_date,
        "issue_date": "2023-05-05",
        "identifier": identifier,
        "name": f"Change {identifier}",
        "part": part,
        "subpart": subpart,
        "substantive": substantive,
        "removed": False,
        "title": "7",
        "type": "section",
    }


class TestVersionHistoryResolver:

    @pytest.fixture
    def resolver(self, client):
        return VersionHistoryResolver(client)

    def test_keeps_only_substantive_changes(self, resolver, fake_ecfr):
        fake_ecfr.add_json(f"{API}/versions/title-7.json", {"content_versions": [
            version("1.1", True, "2023-05-01", part="300", subpart="A"),
            version("1.2", False, "2023-06-01", part="300"),
            version("1.3", True, "2023-07-01"),
            version("1.4", False, "2023-08-01"),
        ]})

        changes = resolver.resolve(7)

        assert [c.id for c in changes] == ["1.1", "1.3"]
        assert changes[0].ref_uri == f"{RENDERER}/2023-05-01/title-7?part=300&subpart=A"
        assert changes[1].ref_uri == f"{RENDERER}/2023-07-01/title-7"

    def test_change_fields(self, resolver, fake_ecfr):
        fake_ecfr.add_json(f"{API}/versions/title-7.json", {"content_versions": [
            version("300.1", True, "2023-05-01", part="300"),
        ]})

        change = resolver.resolve(7)[0]

        assert change.title == 7
        assert change.description == "Change 300.1"
        assert change.issue_date == date(2023, 5, 5)
        assert change.amendment_date == date(2023, 5, 1)
        assert change.ref_uri == f"{RENDERER}/2023-05-01/title-7?part=300"

    def test_subpart_without_part_is_omitted(self, resolver, fake_ecfr):
        fake_ecfr.add_json(f"{API}/versions/title-7.json", {"content_versions": [
            version("1.1", True, subpart="B"),
        ]})

        assert resolver.resolve(7)[0].ref_uri == f"{RENDERER}/2023-05-01/title-7"

    def test_order_follows_the_api(self, resolver, fake_ecfr):
        fake_ecfr.add_json(f"{API}/versions/title-7.json", {"content_versions": [
            version("b", True, "2024-01-01"),
            version("a", True, "2022-01-01"),
        ]})

        assert [c.id for c in resolver.resolve(7)] == ["b", "a"]

    def test_remote_failure_yields_empty_list(self, resolver, fake_ecfr):
        fake_ecfr.add_error(f"{API}/versions/title-7.json", status=500)

        assert resolver.resolve(7) == []

    def test_malformed_payload_yields_empty_list(self, resolver, fake_ecfr):
        fake_ecfr.add_json(f"{API}/versions/title-7.json", {"content_versions": [{"identifier": "x"}]})

        assert resolver.resolve(7) == []

    def test_fetch_history_raises_explicit_error(self, resolver, fake_ecfr):
        fake_ecfr.add_error(f"{API}/versions/title-7.json", status=404, reason="Not Found")

        with pytest.raises(VersionHistoryUnavailable) as exc_info:
            resolver.fetch_history(7)

        assert exc_info.value.title_number == 7
        assert exc_info.value.cause is not None

    def test_empty_history(self, resolver, fake_ecfr):
        fake_ecfr.add_json(f"{API}/versions/title-7.json", {"content_versions": []})

        assert resolver.resolve(7) == []
