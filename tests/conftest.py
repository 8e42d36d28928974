"""
Shared fixtures: an in-memory stand-in for the eCFR HTTP API.
"""
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import hashlib
import pytest
from unittest.mock import Mock

from ecfr_stats.core.cache import DocumentCache
from ecfr_stats.ingestion import EcfrClient

BASE_URL = "https://ecfr.test"
API = f"{BASE_URL}/api/versioner/v1"


def make_response(json_data=None, text=None, status=200, reason="OK"):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status
    response.reason = reason
    response.ok = status < 400
    response.text = text if text is not None else ""
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    return response


class FakeEcfr:
    """Routes session.get calls to canned responses keyed by full URI."""

    def __init__(self):
        self.routes = {}
        self.session = Mock()
        self.session.headers = {}
        self.session.get.side_effect = self._get

    def add_json(self, uri, data):
        self.routes[uri] = make_response(json_data=data)

    def add_text(self, uri, text):
        self.routes[uri] = make_response(text=text)

    def add_error(self, uri, status=500, reason="Internal Server Error"):
        self.routes[uri] = make_response(status=status, reason=reason)

    def requested(self):
        return [call.args[0] for call in self.session.get.call_args_list]

    def _get(self, uri, timeout=None):
        if uri in self.routes:
            return self.routes[uri]
        return make_response(status=404, reason="Not Found")


TITLE_CATALOG = {
    "titles": [
        {
            "number": 7,
            "name": "Agriculture",
            "latest_amended_on": "2023-05-01",
            "latest_issue_date": "2023-05-05",
            "up_to_date_as_of": "2024-01-02",
            "reserved": False,
        },
        {
            "number": 35,
            "name": "Panama Canal",
            "latest_amended_on": None,
            "latest_issue_date": None,
            "up_to_date_as_of": None,
            "reserved": True,
        },
        {
            "number": 40,
            "name": "Protection of Environment",
            "latest_amended_on": "2024-01-01",
            "latest_issue_date": "2024-01-01",
            "up_to_date_as_of": "2024-01-02",
            "reserved": False,
        },
    ]
}

TITLE_7_STRUCTURE = {
    "identifier": "7",
    "label": "Title 7 - Agriculture",
    "type": "title",
    "reserved": False,
    "children": [
        {
            "identifier": "I",
            "label": "Chapter I",
            "type": "chapter",
            "reserved": False,
            "children": [
                {"identifier": "300", "type": "part", "reserved": False, "children": None},
                {"identifier": "301", "type": "part", "reserved": False},
            ],
        },
    ],
}

TITLE_7_VERSIONS = {
    "content_versions": [
        {
            "date": "2023-05-01",
            "amendment_date": "2023-05-01",
            "issue_date": "2023-05-05",
            "identifier": "300.1",
            "name": "§ 300.1 Definitions.",
            "part": "300",
            "substantive": True,
            "removed": False,
            "subpart": None,
            "title": "7",
            "type": "section",
        }
    ]
}


def md5(text):
    return hashlib.md5(text.encode("utf-8")).hexdigest()


@pytest.fixture
def fake_ecfr():
    return FakeEcfr()


@pytest.fixture
def client(fake_ecfr):
    return EcfrClient(base_url=BASE_URL, cache=DocumentCache(), session=fake_ecfr.session, timeout=5)


@pytest.fixture
def title_7_api(fake_ecfr):
    """Title 7, chapter I with parts 300 and 301 and one substantive change."""
    fake_ecfr.add_json(f"{API}/titles.json", TITLE_CATALOG)
    fake_ecfr.add_json(f"{API}/structure/2024-01-02/title-7.json", TITLE_7_STRUCTURE)
    fake_ecfr.add_text(f"{API}/full/2024-01-02/title-7.xml?part=300",
                       '<DIV5 N="300" TYPE="PART"><P>Rule A.</P></DIV5>')
    fake_ecfr.add_text(f"{API}/full/2024-01-02/title-7.xml?part=301",
                       '<DIV5 N="301" TYPE="PART"><P>Rule B.</P></DIV5>')
    fake_ecfr.add_json(f"{API}/versions/title-7.json", TITLE_7_VERSIONS)
    return fake_ecfr
