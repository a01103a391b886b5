import asyncio
from pathlib import Path

import pytest

from blog.models.post import PostRecord
from blog.services import post_loader
from blog.services.post_loader import PostLoadError


def post_text(date=None, **meta):
    lines = ["---"]
    if date is not None:
        lines.append(f'date: "{date}"')
    lines.extend(f"{key}: {value}" for key, value in meta.items())
    lines.extend(["---", "", "Body text."])
    return "\n".join(lines)


def test_slug_is_filename_without_extension():
    assert post_loader.slug_for(Path("posts/hello-world.svx"), ".svx") == "hello-world"
    assert post_loader.slug_for(Path("posts/notes.svelte.md"), ".svelte.md") == "notes"


def test_only_feed_extension_files_are_listed(site_config, make_post):
    make_post("one.svx", post_text("2021-01-01"))
    make_post("draft.md", post_text("2021-01-02"))
    make_post("nested/two.svx", post_text("2021-01-03"))

    names = [path.name for path in post_loader.list_post_files(site_config)]
    assert names == ["one.svx"]


def test_missing_posts_directory_yields_empty_feed(site_config):
    assert asyncio.run(post_loader.load_feed(site_config)) == []


def test_record_passes_metadata_through_and_slug_wins(site_config, make_post):
    path = make_post("real-slug.svx", post_text("2021-05-01", title="Hi", slug="other", tags="[a, b]"))

    record = post_loader.load_record(path, site_config.feed_extension)
    assert record.to_dict() == {
        "date": "2021-05-01",
        "title": "Hi",
        "slug": "real-slug",
        "tags": ["a", "b"],
    }


def test_unquoted_dates_become_iso_strings(make_post, site_config):
    path = make_post("dated.svx", "---\ndate: 2020-02-03\n---\nBody")
    record = post_loader.load_record(path, site_config.feed_extension)
    assert record.metadata["date"] == "2020-02-03"


def test_feed_is_sorted_by_date_string_descending(site_config, make_post):
    make_post("old.svx", post_text("2019-12-31"))
    make_post("new.svx", post_text("2021-06-14"))
    make_post("mid.svx", post_text("2020-07-01"))

    records = asyncio.run(post_loader.load_feed(site_config))
    assert [record.slug for record in records] == ["new", "mid", "old"]


def test_ordering_is_lexical_not_chronological():
    records = [
        PostRecord(slug="october", metadata={"date": "2021-10-01"}),
        PostRecord(slug="september", metadata={"date": "2021-9-01"}),
    ]
    # "2021-9-01" > "2021-10-01" as strings even though it is older
    assert [record.slug for record in post_loader.sort_posts(records)] == ["september", "october"]


def test_undated_posts_sort_last():
    records = [
        PostRecord(slug="undated", metadata={"title": "No date"}),
        PostRecord(slug="dated", metadata={"date": "2000-01-01"}),
    ]
    assert [record.slug for record in post_loader.sort_posts(records)] == ["dated", "undated"]


def test_every_pair_respects_string_order(site_config, make_post):
    dates = ["2021-01-05", "2020-11-30", "2021-01-15", "2019-03-03", "2021-12-01"]
    for index, value in enumerate(dates):
        make_post(f"post-{index}.svx", post_text(value))

    records = asyncio.run(post_loader.load_feed(site_config))
    seen = [record.date for record in records]
    for earlier, later in zip(seen, seen[1:]):
        assert earlier >= later


def test_malformed_frontmatter_raises(site_config, make_post):
    path = make_post("broken.svx", "---\ntitle: [unclosed\n---\nBody")

    with pytest.raises(PostLoadError) as excinfo:
        asyncio.run(post_loader.load_feed(site_config))
    assert excinfo.value.path == path


def test_find_page_tries_each_extension(site_config, make_post):
    make_post("index.md", "---\ntitle: About\n---\nHello", section="about")

    path = post_loader.find_page("about", "index", site_config)
    assert path is not None and path.name == "index.md"
    assert post_loader.find_page("about", "missing", site_config) is None
    assert post_loader.find_page("about", "../about/index", site_config) is None


def test_load_page_renders_through_layout(site_config, make_post):
    path = make_post("hello.svx", post_text("2021-06-14", title="Hello") + "\n\n- a\n- b\n")

    page = post_loader.load_page(path, site_config)
    assert page.slug == "hello"
    assert page.layout == "layouts/posts.html"
    assert page.title == "Hello"
    assert '<ul class="md-list">' in page.content_html
