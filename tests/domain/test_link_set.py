from articlecrawl.domain.link_set import LinkSet


def test_link_set_starts_empty():
    links = LinkSet()
    assert len(links) == 0
    assert list(links) == []


def test_link_set_absorbs_duplicates():
    links = LinkSet()
    assert links.add("https://example.test/a") is True
    assert links.add("https://example.test/a") is False
    assert len(links) == 1


def test_link_set_preserves_discovery_order():
    links = LinkSet(["https://example.test/b", "https://example.test/a"])
    links.update(["https://example.test/a", "https://example.test/c"])
    assert list(links) == [
        "https://example.test/b",
        "https://example.test/a",
        "https://example.test/c",
    ]


def test_update_reports_new_links_only():
    links = LinkSet(["x"])
    assert links.update(["x", "y", "y", "z"]) == 2
    assert "y" in links
    assert "w" not in links
