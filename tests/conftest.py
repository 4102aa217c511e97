"""
In-memory stand-ins for the feed, the spreadsheet, the content store and the
SMS gateway, shaped like the real adapters' public methods.
"""

import threading

import pytest

from hop.core.models import BlogPost, LocationFix


class FakeFeed:
    def __init__(self, fixes=None, posts=None, error=None):
        self.fixes = list(fixes or [])
        self.posts = list(posts or [])
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.fixes), list(self.posts)


class FakeSheets:
    def __init__(self, tabs=None):
        self.tabs = {k: list(v) for k, v in (tabs or {}).items()}
        self.appended = {}
        self.subscriber_reads = 0

    def read_keys(self, title):
        return list(self.tabs.get(title, []))

    def read_subscribers(self):
        self.subscriber_reads += 1
        return self.read_keys("SMS Subscribers")

    def append_rows(self, title, headers, rows):
        if not rows:
            return 0
        self.appended.setdefault(title, []).extend(rows)
        self.tabs.setdefault(title, []).extend(str(r[headers[0]]) for r in rows)
        return len(rows)


class FakeContent:
    def __init__(self, docs=None, fail_on_type=None):
        self.docs = {d["_id"]: dict(d) for d in (docs or [])}
        self.fail_on_type = fail_on_type
        self.ops = []
        self._lock = threading.Lock()

    def _check(self, doc):
        if self.fail_on_type and doc.get("_type") == self.fail_on_type:
            raise RuntimeError(f"write refused for {doc['_id']}")

    def fetch_post_ids(self):
        return [i for i, d in self.docs.items() if d.get("_type") == "post"]

    def fetch_posts(self):
        return {
            i: {"_id": i, "title": d.get("title"), "html": d.get("html"), "replaceState": d.get("replaceState")}
            for i, d in self.docs.items() if d.get("_type") == "post"
        }

    def create_if_absent(self, doc):
        self._check(doc)
        with self._lock:
            self.ops.append(("createIfNotExists", doc["_id"]))
            self.docs.setdefault(doc["_id"], dict(doc))

    def create_or_replace(self, doc):
        self._check(doc)
        with self._lock:
            self.ops.append(("createOrReplace", doc["_id"]))
            self.docs[doc["_id"]] = dict(doc)

    def patch_set(self, doc_id, fields):
        with self._lock:
            self.ops.append(("patch", doc_id))
            if doc_id in self.docs:
                self.docs[doc_id].update(fields)

    def delete_photos_for_post(self, post_id):
        with self._lock:
            self.ops.append(("deletePhotos", post_id))
            for i in [i for i, d in self.docs.items()
                      if d.get("_type") == "photo" and (d.get("post") or {}).get("_ref") == post_id]:
                del self.docs[i]

    def get_post(self, post_id):
        doc = self.docs.get(post_id)
        return dict(doc) if doc and doc.get("_type") == "post" else None

    def of_type(self, doc_type):
        return {i: d for i, d in self.docs.items() if d.get("_type") == doc_type}


class FakeSms:
    def __init__(self, error=None):
        self.sent = []
        self.error = error
        self._lock = threading.Lock()

    def send(self, to_number, body, media_urls=None):
        if self.error:
            raise self.error
        with self._lock:
            self.sent.append((to_number, body, list(media_urls or [])))
        return "SM123"


# 2021-09-10T12:00:00Z
POST_EPOCH = 1631275200


def make_fix(t, lat=0.0, lon=0.0):
    return LocationFix(epoch=t, latitude=lat, longitude=lon)


@pytest.fixture
def cfg():
    return {
        "content_write_delay_s": 0,
        "max_workers": 4,
        "sms_enabled": True,
        "post_link_template": "https://x.test/p/{topic_id}",
    }


@pytest.fixture
def day3_post():
    return BlogPost(
        id="42",
        title="Day 3",
        raw_body="All well ![Photo|800x600](http://x.test/img/abc.jpg))",
        html_body="<p>All well</p>",
        created_at="2021-09-10T12:00:00Z",
    )


@pytest.fixture
def spanning_fixes():
    return [
        make_fix(POST_EPOCH - 1200, 10.0, -150.0),
        make_fix(POST_EPOCH - 600, 10.5, -150.5),
        make_fix(POST_EPOCH + 600, 11.0, -151.0),
    ]
