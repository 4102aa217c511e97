"""
Tests for reconcile.py - republishing stored posts whose upstream content changed.
"""

import dataclasses

import pytest
from hop.core.pipeline import Pipeline
from hop.core.reconcile import Reconciler, needs_republish

from conftest import FakeContent, FakeFeed, FakeSheets, FakeSms


def _ingest(cfg, fixes, posts, content):
    Pipeline(cfg, feed=FakeFeed(fixes, posts), sheets=FakeSheets(), content=content, sms=FakeSms()).run_cycle()


class TestNeedsRepublish:

    def test_same_content(self, day3_post):
        assert not needs_republish(day3_post, {"title": "Day 3", "html": "<p>All well</p>"})

    def test_title_or_html_changed(self, day3_post):
        assert needs_republish(day3_post, {"title": "Day three", "html": "<p>All well</p>"})
        assert needs_republish(day3_post, {"title": "Day 3", "html": "<p>All good</p>"})


class TestReconcileCycle:

    def test_unchanged_post_after_ingest_is_skipped(self, cfg, day3_post, spanning_fixes):
        content = FakeContent()
        _ingest(cfg, spanning_fixes, [day3_post], content)
        content.ops.clear()

        result = Reconciler(cfg, feed=FakeFeed(spanning_fixes, [day3_post]), content=content).run_cycle()

        assert result.checked == 1
        assert result.skipped_unchanged == 1
        assert result.republished == 0
        assert content.ops == []

    def test_missing_post_is_not_created(self, cfg, day3_post):
        content = FakeContent()
        result = Reconciler(cfg, feed=FakeFeed([], [day3_post]), content=content).run_cycle()

        assert result.skipped_missing == 1
        assert content.docs == {}
        assert content.ops == []

    def test_changed_post_is_republished(self, cfg, day3_post, spanning_fixes):
        content = FakeContent()
        _ingest(cfg, spanning_fixes, [day3_post], content)
        content.ops.clear()

        edited = dataclasses.replace(
            day3_post,
            raw_body="All well, new pic ![Photo|640x480](http://x.test/img/def.png)",
            html_body="<p>All well, new pic</p>",
        )
        result = Reconciler(cfg, feed=FakeFeed(spanning_fixes, [edited]), content=content).run_cycle()

        assert result.republished == 1
        post = content.docs["42"]
        assert post["content"] == "All well, new pic"
        assert post["html"] == "<p>All well, new pic</p>"
        assert post["replaceState"] == "replaced"
        assert post["updatedAt"]
        assert list(content.of_type("photo")) == ["def"]

        kinds = [op for op, _ in content.ops]
        assert kinds[:3] == ["patch", "deletePhotos", "createOrReplace"]
        assert kinds[-1] == "patch"

    def test_crash_mid_replace_is_resumed(self, cfg, day3_post, spanning_fixes):
        content = FakeContent()
        _ingest(cfg, spanning_fixes, [day3_post], content)
        edited = dataclasses.replace(day3_post, html_body="<p>edited</p>")

        content.fail_on_type = "photo"
        with pytest.raises(RuntimeError):
            Reconciler(cfg, feed=FakeFeed(spanning_fixes, [edited]), content=content).run_cycle()
        assert content.docs["42"]["replaceState"] == "pending-replace"
        assert content.of_type("photo") == {}

        # html already matches the feed now; the marker alone forces the resume
        content.fail_on_type = None
        result = Reconciler(cfg, feed=FakeFeed(spanning_fixes, [edited]), content=content).run_cycle()

        assert result.resumed == 1
        assert result.republished == 0
        assert content.docs["42"]["replaceState"] == "replaced"
        assert list(content.of_type("photo")) == ["abc"]


class TestRepublishById:

    def test_forces_republish(self, cfg, day3_post, spanning_fixes):
        content = FakeContent()
        _ingest(cfg, spanning_fixes, [day3_post], content)
        post = Reconciler(cfg, feed=FakeFeed(spanning_fixes, [day3_post]), content=content).republish_by_id("42")

        assert post.id == "42"
        assert content.docs["42"]["replaceState"] == "replaced"

    def test_unknown_id(self, cfg, day3_post):
        content = FakeContent()
        assert Reconciler(cfg, feed=FakeFeed([], [day3_post]), content=content).republish_by_id("99") is None
        assert content.ops == []

    def test_unstored_id_is_not_created(self, cfg, day3_post):
        content = FakeContent()
        assert Reconciler(cfg, feed=FakeFeed([], [day3_post]), content=content).republish_by_id("42") is None
        assert content.docs == {}
