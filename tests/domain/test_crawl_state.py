from articlecrawl.domain.crawl_state import CrawlFailure, CrawlState


def test_new_state_is_empty():
    state = CrawlState()
    assert state.visited_listing_pages == set()
    assert len(state.discovered_links) == 0
    assert state.collected_records == []
    assert state.failures == []
    assert state.stopped is False


def test_record_failure_keeps_order():
    state = CrawlState()
    state.record_failure("https://example.test/1", "HTTP 500")
    state.record_failure("https://example.test/2", "timed out")
    assert state.failures == [
        CrawlFailure("https://example.test/1", "HTTP 500"),
        CrawlFailure("https://example.test/2", "timed out"),
    ]
