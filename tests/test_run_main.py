"""
Tests for run.py main() with an injected container.
No network or browser is touched: the fetch layer is overridden with canned pages.
"""
from contextlib import contextmanager
from unittest.mock import MagicMock

from articlecrawl.container import Container
from articlecrawl.domain.http_response import HttpResponse
from articlecrawl.exceptions import RenderingSessionUnavailable
from articlecrawl.services.crawl_executor import CrawlExecutor
from articlecrawl.services.html_extractor import HtmlExtractor
from articlecrawl.services.result_sink import CsvResultSink
from run import EXIT_OK, EXIT_PERSIST_FAILED, EXIT_STARTUP_FAILED, main

JOB = """
name: test-tag
base_url: https://example.test/tag
page_count: 1
fetch:
  mode: http
listing:
  links: {selector: "a.story", multiplicity: many, attribute: href}
article:
  title: h1
  body: {selector: "p", multiplicity: many, join: true}
"""

PAGES = {
    "https://example.test/tag?page=1": HttpResponse(200, '<a class="story" href="/s1">1</a><a class="story" href="/s2">2</a>'),
    "https://example.test/s1": HttpResponse(200, "<h1>S1</h1><p>line one</p><p>line two</p>"),
}


class _Backend:
    def fetch(self, url):
        return PAGES.get(url, HttpResponse(404, ""))


class _Factory:
    def __init__(self, error=None):
        self.error = error

    @contextmanager
    def open(self, fetch_mode, config=None):
        if self.error is not None:
            raise self.error
        yield _Backend()


def _container(factory=None):
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.crawl_executor.override(
        CrawlExecutor(extractor=HtmlExtractor(), fetcher_factory=factory or _Factory(), delay_seconds=0)
    )
    return container


def _job(tmp_path, text=JOB):
    path = tmp_path / "job.yml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_container_creates_services():
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.config.HTTP_TIMEOUT.from_value(5)

    assert container.http_service().user_agent == "TestBot/1.0"
    assert container.http_service().timeout == 5
    assert container.fetcher_factory() is container.fetcher_factory()
    assert isinstance(container.crawl_executor(), CrawlExecutor)
    assert isinstance(container.result_sink(), CsvResultSink)


def test_container_rendering_sessions_are_per_run():
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.config.HTTP_TIMEOUT.from_value(5)
    first = container.rendering_session()
    second = container.rendering_session()
    assert first is not second
    assert first.options.timeout_ms == 5000
    assert not first.is_open


def test_main_crawls_and_writes_csv(tmp_path):
    out = tmp_path / "out.csv"
    code = main([_job(tmp_path), "--output", str(out)], container=_container())
    assert code == EXIT_OK
    records = CsvResultSink().load(str(out))
    assert [(r.url, r.title, r.body) for r in records] == [("https://example.test/s1", "S1", "line one\nline two")]


def test_main_append_keeps_previous_rows(tmp_path):
    out = tmp_path / "out.csv"
    job = _job(tmp_path)
    main([job, "--output", str(out)], container=_container())
    main([job, "--output", str(out), "--append"], container=_container())
    assert len(CsvResultSink().load(str(out))) == 2


def test_main_rejects_invalid_job(tmp_path):
    job = _job(tmp_path, "base_url: https://example.test/tag\n")
    assert main([job, "--output", str(tmp_path / "o.csv")], container=_container()) == EXIT_STARTUP_FAILED


def test_main_requires_destination(tmp_path):
    assert main([_job(tmp_path)], container=_container()) == EXIT_STARTUP_FAILED


def test_main_rendering_session_failure_is_fatal(tmp_path):
    factory = _Factory(error=RenderingSessionUnavailable("no chromium"))
    out = tmp_path / "out.csv"
    assert main([_job(tmp_path), "--output", str(out)], container=_container(factory)) == EXIT_STARTUP_FAILED
    assert not out.exists()


def test_main_persist_failure(tmp_path):
    out = tmp_path / "missing" / "out.csv"
    assert main([_job(tmp_path), "--output", str(out)], container=_container()) == EXIT_PERSIST_FAILED


def test_main_persists_partial_state_on_interrupt(tmp_path):
    out = tmp_path / "out.csv"
    container = _container()
    executor = MagicMock()

    def interrupted_run(job, state=None, stop_event=None):
        state.discovered_links.add("https://example.test/s1")
        raise KeyboardInterrupt

    executor.run.side_effect = interrupted_run
    container.crawl_executor.override(executor)
    assert main([_job(tmp_path), "--output", str(out)], container=container) == EXIT_OK
    assert out.exists()
    assert CsvResultSink().load(str(out)) == []


def test_pages_override(tmp_path):
    container = _container()
    executor = MagicMock()
    container.crawl_executor.override(executor)
    main([_job(tmp_path), "--output", str(tmp_path / "o.csv"), "--pages", "4"], container=container)
    job = executor.run.call_args.args[0]
    assert job.page_count == 4


def test_container_defaults_come_from_config_module():
    from articlecrawl.container import ENV

    container = Container()
    assert container.config.USER_AGENT() == ENV["USER_AGENT"]
    assert container.config.HTTP_TIMEOUT() == ENV["HTTP_TIMEOUT"]
    assert set(ENV) == {"USER_AGENT", "HTTP_TIMEOUT", "CRAWL_DELAY", "FETCH_RETRIES", "RETRY_BACKOFF_SECONDS"}
