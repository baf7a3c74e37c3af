"""Unit tests for placeholder links and the posts list helpers."""

import unittest
from datetime import datetime, timedelta, timezone

from humpswiki.presentation.listing import (
    NO_BODY_TEXT,
    paginate,
    post_card,
    search_posts,
    sort_posts,
    strip_post_placeholders,
    summarize,
)
from humpswiki.presentation.placeholders import (
    referenced_titles,
    render_placeholder_links,
    strip_placeholders,
)
from humpswiki.schemas.auth import Actor
from humpswiki.schemas.post import PostRead

BASE_TIME = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _post(
    post_id: int,
    title: str,
    body: str = "Body",
    created_offset_days: int = 0,
    modified_offset_days: int | None = None,
    author: str = "alice",
) -> PostRead:
    return PostRead(
        id=post_id,
        author=author,
        post_title=title,
        sections=[{"title": "Bio", "body": body, "imageURL": ""}],
        details=[],
        created_date=BASE_TIME + timedelta(days=created_offset_days),
        modified_date=(
            BASE_TIME + timedelta(days=modified_offset_days)
            if modified_offset_days is not None
            else None
        ),
    )


class TestPlaceholders(unittest.TestCase):
    def test_strip_on_list_views(self) -> None:
        self.assertEqual(strip_placeholders("{{Randy}}"), "Randy")
        self.assertEqual(
            strip_placeholders("Friends with {{Randy}} and {{Matt}}."),
            "Friends with Randy and Matt.",
        )

    def test_detail_view_renders_link(self) -> None:
        self.assertEqual(render_placeholder_links("{{Randy}}"), '<a href="/posts/Randy">Randy</a>')

    def test_link_titles_are_url_quoted(self) -> None:
        html = render_placeholder_links("See {{Big Ed}}")
        self.assertEqual(html, 'See <a href="/posts/Big%20Ed">Big Ed</a>')

    def test_text_is_escaped_and_newlines_break(self) -> None:
        html = render_placeholder_links("<b>hi</b>\n{{Randy}}")
        self.assertIn("&lt;b&gt;hi&lt;/b&gt;<br>\n", html)
        self.assertIn('<a href="/posts/Randy">Randy</a>', html)

    def test_referenced_titles(self) -> None:
        self.assertEqual(referenced_titles("{{A}} x {{B}} {{A}}"), ["A", "B", "A"])

    def test_text_without_placeholders_unchanged(self) -> None:
        self.assertEqual(strip_placeholders("plain {text}"), "plain {text}")


class TestSearchAndSort(unittest.TestCase):
    def setUp(self) -> None:
        self.posts = [
            _post(1, "banana", created_offset_days=1, modified_offset_days=5),
            _post(2, "Apple", created_offset_days=3),
            _post(3, "cherry", created_offset_days=2, modified_offset_days=4),
        ]

    def test_search_is_case_insensitive(self) -> None:
        self.assertEqual([p.id for p in search_posts(self.posts, "APP")], [2])
        self.assertEqual(len(search_posts(self.posts, "  ")), 3)

    def test_sort_by_title(self) -> None:
        self.assertEqual([p.post_title for p in sort_posts(self.posts, "title")], ["Apple", "banana", "cherry"])
        flipped = sort_posts(self.posts, "title", flipped=True)
        self.assertEqual([p.post_title for p in flipped], ["cherry", "banana", "Apple"])

    def test_sort_by_created_newest_first(self) -> None:
        self.assertEqual([p.id for p in sort_posts(self.posts, "created")], [2, 3, 1])
        self.assertEqual([p.id for p in sort_posts(self.posts, "created", flipped=True)], [1, 3, 2])

    def test_sort_by_modified_falls_back_to_created(self) -> None:
        self.assertEqual([p.id for p in sort_posts(self.posts, "modified")], [1, 3, 2])


class TestPaginate(unittest.TestCase):
    def test_pages_of_ten(self) -> None:
        posts = [_post(i, f"Post {i}") for i in range(1, 24)]
        first = paginate(posts, 1)
        self.assertEqual(first.total_pages, 3)
        self.assertEqual([p.id for p in first.items], list(range(1, 11)))
        last = paginate(posts, 3)
        self.assertEqual([p.id for p in last.items], [21, 22, 23])

    def test_page_is_clamped(self) -> None:
        posts = [_post(i, f"Post {i}") for i in range(1, 4)]
        self.assertEqual(paginate(posts, 9).page, 1)
        self.assertEqual(paginate(posts, 0).page, 1)

    def test_empty(self) -> None:
        page = paginate([], 1)
        self.assertEqual(page.items, [])
        self.assertEqual(page.total_pages, 0)


class TestCards(unittest.TestCase):
    def test_summary_strips_and_truncates(self) -> None:
        post = _post(1, "Long", body="{{Randy}} " + "x" * 200)
        summary = summarize(post)
        self.assertTrue(summary.startswith("Randy x"))
        self.assertTrue(summary.endswith("..."))
        self.assertEqual(len(summary), 103)

    def test_summary_without_sections(self) -> None:
        post = _post(1, "Empty").model_copy(update={"sections": []})
        self.assertEqual(summarize(post), NO_BODY_TEXT)

    def test_card_permissions_follow_policy(self) -> None:
        post = _post(1, "Randy", author="alice")
        owner = post_card(post, Actor(username="alice", role="contributor"))
        self.assertTrue(owner.can_edit)
        self.assertTrue(owner.can_delete)
        subject = post_card(post, Actor(username="randy", role="contributor"))
        self.assertTrue(subject.can_edit)
        self.assertFalse(subject.can_delete)
        anonymous = post_card(post, None)
        self.assertFalse(anonymous.can_edit)
        self.assertEqual(anonymous.href, "/posts/Randy")

    def test_strip_post_placeholders(self) -> None:
        post = _post(1, "Home", body="Meet {{Randy}}")
        self.assertEqual(strip_post_placeholders(post).sections[0].body, "Meet Randy")
        self.assertEqual(post.sections[0].body, "Meet {{Randy}}")


if __name__ == "__main__":
    unittest.main()
