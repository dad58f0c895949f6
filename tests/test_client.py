import pytest
import requests

from contentful_pages import ContentfulClient, FetchError, MissingCredentialError


class FakeResponse:
    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def json(self):
        if self.payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    def __init__(self, *responses):
        self.headers = {}
        self.responses = list(responses)
        self.requests = []
        self.sent_headers = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.requests.append((url, dict(params or {})))
        self.sent_headers.append(dict(headers or {}))
        res = self.responses.pop(0)
        if isinstance(res, Exception):
            raise res
        return res


def link(link_type, id_):
    return {"sys": {"type": "Link", "linkType": link_type, "id": id_}}


def test_credentials_are_required():
    with pytest.raises(MissingCredentialError):
        ContentfulClient("", "space", session=FakeSession())
    with pytest.raises(MissingCredentialError):
        ContentfulClient("token", "", session=FakeSession())


def test_content_type_request():
    session = FakeSession(FakeResponse({"name": "Blog Post", "displayField": "title"}))
    client = ContentfulClient("token", "aqzq2qya2jm4", session=session)
    assert client.content_type("post") == {"name": "Blog Post", "displayField": "title"}
    assert session.requests == [("https://cdn.contentful.com/spaces/aqzq2qya2jm4/content_types/post", {})]
    assert session.sent_headers[0]["Authorization"] == "Bearer token"
    assert session.sent_headers[0]["Accept"] == "application/json"


def test_callers_session_is_not_modified():
    session = FakeSession(FakeResponse({"name": "x"}), FakeResponse({"items": [], "total": 0}))
    session.headers = {"X-Trace": "abc"}
    client = ContentfulClient("token", "space", session=session)
    client.content_type("post")
    client.entries()
    assert session.headers == {"X-Trace": "abc"}
    assert [h["Authorization"] for h in session.sent_headers] == ["Bearer token", "Bearer token"]


def test_preview_host_and_environment():
    session = FakeSession(FakeResponse({"name": "x"}))
    client = ContentfulClient("token", "space", preview=True, environment="staging", session=session)
    client.content_type("post")
    assert session.requests[0][0] == "https://preview.contentful.com/spaces/space/environments/staging/content_types/post"


def test_entries_are_paged():
    first = {"total": 3, "items": [{"sys": {"id": "1"}, "fields": {}}, {"sys": {"id": "2"}, "fields": {}}]}
    second = {"total": 3, "items": [{"sys": {"id": "3"}, "fields": {}}]}
    session = FakeSession(FakeResponse(first), FakeResponse(second))
    client = ContentfulClient("token", "space", session=session)

    items = client.entries({"content_type": "post", "limit": 2})
    assert [e["sys"]["id"] for e in items] == ["1", "2", "3"]
    assert [params for _, params in session.requests] == [
        {"content_type": "post", "limit": 2, "skip": 0},
        {"content_type": "post", "limit": 2, "skip": 2},
    ]


def test_links_are_resolved_from_includes():
    image = {"sys": {"id": "img", "type": "Asset"}, "fields": {"file": {"url": "//images.ctfassets.net/wow.jpg"}}}
    author = {"sys": {"id": "au", "type": "Entry"}, "fields": {"name": "Doge", "posts": [link("Entry", "p1")]}}
    payload = {
        "total": 1,
        "items": [{
            "sys": {"id": "p1", "type": "Entry"},
            "fields": {
                "title": "Real Talk",
                "image": link("Asset", "img"),
                "author": link("Entry", "au"),
                "missing": link("Asset", "gone"),
            },
        }],
        "includes": {"Asset": [image], "Entry": [author]},
    }
    client = ContentfulClient("token", "space", session=FakeSession(FakeResponse(payload)))

    [entry] = client.entries({"content_type": "post"})
    fields = entry["fields"]
    assert fields["image"]["fields"]["file"]["url"] == "//images.ctfassets.net/wow.jpg"
    assert fields["author"]["fields"]["name"] == "Doge"
    # back reference to the entry itself stays a link
    assert fields["author"]["fields"]["posts"] == [link("Entry", "p1")]
    assert fields["missing"] == link("Asset", "gone")
    assert entry["sys"] == {"id": "p1", "type": "Entry"}


def test_http_error_becomes_fetch_error():
    session = FakeSession(FakeResponse({"message": "The resource could not be found."}, status=404))
    client = ContentfulClient("token", "space", session=session)
    with pytest.raises(FetchError, match="404") as exc:
        client.content_type("nope")
    assert isinstance(exc.value.__cause__, requests.HTTPError)
    assert len(session.requests) == 1


def test_connection_error_becomes_fetch_error():
    session = FakeSession(requests.ConnectionError("Name or service not known"))
    client = ContentfulClient("token", "space", session=session)
    with pytest.raises(FetchError):
        client.entries({"content_type": "post"})


def test_invalid_json_becomes_fetch_error():
    client = ContentfulClient("token", "space", session=FakeSession(FakeResponse(None)))
    with pytest.raises(FetchError, match="invalid JSON"):
        client.content_type("post")
