import json

from scripts.build_static import build_site


def test_build_site_writes_pages_and_feeds(tmp_path, site_config, make_post):
    make_post("hello.svx", '---\ntitle: Hello\ndate: "2021-06-14"\n---\n- item\n')
    make_post("index.md", "---\ntitle: About\n---\nAbout me.", section="about")
    output = tmp_path / "build"

    build_site(output, "my-blog", config=site_config)

    feed = json.loads((output / "posts.json").read_text(encoding="utf-8"))
    assert feed == {"posts": [{"title": "Hello", "date": "2021-06-14", "slug": "hello"}]}
    assert (output / "index.json").read_text(encoding="utf-8") == (output / "posts.json").read_text(encoding="utf-8")

    index_html = (output / "index.html").read_text(encoding="utf-8")
    assert 'href="/my-blog/posts/hello"' in index_html

    post_html = (output / "posts" / "hello" / "index.html").read_text(encoding="utf-8")
    assert '<ul class="md-list">' in post_html
    assert (output / "about" / "index.html").exists()
