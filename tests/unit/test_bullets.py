"""
Unit tests for bullet list splitting.
"""

from app.services.content.bullets import split_all, split_bullet_points


def make_item(body, title="Kitchen: quick wins"):
    return {"id": "abc", "title": title, "body": body, "summary": "s", "tags": ["kitchen"]}


class TestSplitBulletPoints:

    def test_plain_body_is_unchanged(self):
        item = make_item("Just one paragraph of advice.")
        assert split_bullet_points(item) == [item]

    def test_single_bullet_is_unchanged(self):
        item = make_item("- Only one bullet in this body")
        assert split_bullet_points(item) == [item]

    def test_splits_dash_bullets(self):
        item = make_item("- freeze leftover herbs in olive oil\n- store bread cut side down")
        result = split_bullet_points(item)

        assert len(result) == 2
        assert result[0]["title"] == "Kitchen - Freeze leftover herbs in olive oil"
        assert result[0]["body"] == "freeze leftover herbs in olive oil"
        assert result[1]["body"] == "store bread cut side down"
        assert all("id" not in r for r in result)
        assert all(r["tags"] == ["kitchen"] for r in result)

    def test_splits_numbered_bullets(self):
        item = make_item("1. rinse rice until the water runs clear\n2. rest meat before slicing it")
        assert [r["body"] for r in split_bullet_points(item)] == [
            "rinse rice until the water runs clear",
            "rest meat before slicing it",
        ]

    def test_short_bullets_are_dropped(self):
        item = make_item("- tiny\n- this bullet is long enough to keep")
        result = split_bullet_points(item)
        assert len(result) == 1
        assert result[0]["body"] == "this bullet is long enough to keep"

    def test_all_short_bullets_return_original(self):
        item = make_item("- a\n- b\n- c")
        assert split_bullet_points(item) == [item]

    def test_long_bullet_titles_are_truncated(self):
        long_text = "x" * 80
        item = make_item(f"- {long_text}\n- {long_text}", title="")
        result = split_bullet_points(item)
        assert result[0]["title"] == "X" + "x" * 46 + "..."

    def test_long_prefix_is_not_used(self):
        title = "A very long title without any separators at all"
        item = make_item("- first useful bullet here\n- second useful bullet here", title=title)
        assert split_bullet_points(item)[0]["title"] == "First useful bullet here"

    def test_summary_is_truncated(self):
        text = "y" * 130
        result = split_bullet_points(make_item(f"- {text}\n- {text}"))
        assert result[0]["summary"] == "y" * 120 + "..."

    def test_split_all_flattens(self):
        items = [
            make_item("plain"),
            make_item("- first useful bullet here\n- second useful bullet here"),
        ]
        assert len(split_all(items)) == 3
