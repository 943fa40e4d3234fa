"""
Pytest fixtures for feedkeeper tests.
"""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from feedkeeper.config import state
from feedkeeper.database import Database, EntriesVisibility
from feedkeeper.exceptions import NetworkError
from feedkeeper.feed_parser import FeedParser
from feedkeeper.fetcher import FetchedDocument
from feedkeeper.server import app
from feedkeeper.services import IngestionPipeline


RSS_DOCUMENT = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Feed</title>
    <link>https://example.com</link>
    <description>An example feed</description>
    <item>
      <title>Dated entry</title>
      <link>https://example.com/dated</link>
      <author>writer@example.com (Writer)</author>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
      <description>Short summary</description>
      <content:encoded><![CDATA[<p>Full <b>content</b> of the dated entry</p>]]></content:encoded>
    </item>
    <item>
      <title>Undated entry</title>
      <link>https://example.com/undated</link>
      <description>Only a description</description>
    </item>
  </channel>
</rss>
"""

ATOM_DOCUMENT = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <link href="https://atom.example.com/"/>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <updated>2025-01-06T18:30:02Z</updated>
  <entry>
    <title>Atom entry</title>
    <link href="https://atom.example.com/entry"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <published>2025-01-05T18:30:02Z</published>
    <updated>2025-01-06T18:30:02Z</updated>
    <author><name>Atom Author</name></author>
    <summary>Atom summary</summary>
  </entry>
</feed>
"""

JSON_FEED_DOCUMENT = b"""{
  "version": "https://jsonfeed.org/version/1.1",
  "title": "JSON Example",
  "home_page_url": "https://json.example.com/",
  "items": [
    {
      "id": "1",
      "url": "https://json.example.com/1",
      "title": "JSON entry",
      "content_html": "<p>Hello</p>",
      "date_published": "2025-01-04T08:00:00Z"
    }
  ]
}
"""

UNTITLED_RSS_DOCUMENT = b"""<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <link>https://untitled.example.com</link>
    <description>No title here</description>
    <item><title>Orphan</title></item>
  </channel>
</rss>
"""

# Cut off inside the second item
TRUNCATED_RSS_DOCUMENT = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Cut</title>
    <link>https://cut.example.com</link>
    <item>
      <title>one</title>
      <link>https://cut.example.com/1</link>
    </item>
    <item>
      <title>two</title>
      <link>https://c.exa"""

HTML_DOCUMENT = b"""<!DOCTYPE html>
<html><head><title>Not a feed</title></head><body><p>Hello</p></body></html>
"""

FEED_URL = "https://example.com/feed.xml"


class FakeFetcher:
    """Serves canned documents by URL and records every request."""

    def __init__(self, documents: dict[str, bytes] | None = None, content_type: str | None = None):
        self.documents = dict(documents or {})
        self.content_type = content_type
        self.requests: list[str] = []
        self.before_return = None

    async def fetch(self, url: str) -> FetchedDocument:
        self.requests.append(url)
        if url not in self.documents:
            raise NetworkError(f"Fetching {url} failed: HTTP 404 Not Found")
        if self.before_return is not None:
            self.before_return(url)
        return FetchedDocument(
            url=url,
            final_url=url,
            body=self.documents[url],
            content_type=self.content_type,
            etag='"abc123"',
        )


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d) / "feeds.db"


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db
    db.close()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher({FEED_URL: RSS_DOCUMENT})


@pytest.fixture
def pipeline(test_db, fake_fetcher):
    return IngestionPipeline(test_db, fake_fetcher, FeedParser())


@pytest.fixture
def client(test_db, fake_fetcher):
    """Create a test client with isolated database and a fake fetcher."""
    # Store original state
    original_db = state.db
    original_feed_parser = state.feed_parser
    original_fetcher = state.fetcher
    original_ingestion = state.ingestion

    # Set up test state with fresh instances
    state.db = test_db
    state.feed_parser = FeedParser()
    state.fetcher = fake_fetcher
    state.ingestion = IngestionPipeline(test_db, fake_fetcher, state.feed_parser)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.db = original_db
    state.feed_parser = original_feed_parser
    state.fetcher = original_fetcher
    state.ingestion = original_ingestion


@pytest.fixture
def client_with_data(client, test_db):
    """Test client with one subscribed feed: one entry read, one unread."""
    response = client.post("/feeds", headers={"HX-Prompt": FEED_URL})
    assert response.status_code == 201
    feed_id = response.json()["id"]

    entries = test_db.get_entries(feed_id, visibility=EntriesVisibility.ALL)
    dated = next(e for e in entries if e.title == "Dated entry")
    undated = next(e for e in entries if e.title == "Undated entry")
    test_db.toggle_entry_read(dated.id)

    yield client, {
        "feed_id": feed_id,
        "read_entry_id": dated.id,
        "unread_entry_id": undated.id,
    }
