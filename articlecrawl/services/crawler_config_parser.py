import os
from typing import Any, Optional

import soupsieve

from articlecrawl.domain.article import ARTICLE_FIELDS
from articlecrawl.domain.config import CrawlerConfig
from articlecrawl.domain.extraction_rule import ExtractionRule, Multiplicity
from articlecrawl.exceptions import ConfigError
from articlecrawl.services.fetcher_factory import FETCH_MODES
from articlecrawl.services.result_sink import WriteMode

PUBLISHED_AT_FIELD = "published_at"


class CrawlerConfigParser:
    """Parse a YAML dict into a CrawlerConfig.

    Responsibility: schema/validation for crawl job files.
    It does NOT perform filesystem IO.
    """

    def parse(self, *, config_path: str, data: Any) -> CrawlerConfig:
        if not isinstance(data, dict):
            raise ConfigError(config_path, "expected a mapping at the top level")

        base_url = data.get("base_url")
        if not base_url or not isinstance(base_url, str):
            raise ConfigError(config_path, "base_url is required")

        page_count = data.get("page_count")
        if isinstance(page_count, bool) or not isinstance(page_count, int) or page_count < 1:
            raise ConfigError(config_path, "page_count must be an integer >= 1")

        # Only support nested format: fetch: { mode: "http", headless_chromium: { ... } }
        fetch_dict = data.get("fetch") or {}
        fetch_mode = fetch_dict.get("mode") if isinstance(fetch_dict, dict) else None
        if not fetch_mode:
            raise ConfigError(config_path, "fetch.mode is required")
        fetch_mode = str(fetch_mode).strip().lower()
        if fetch_mode not in FETCH_MODES:
            raise ConfigError(config_path, f"unknown fetch.mode {fetch_mode!r}")

        # Mode-specific options go under a key matching the mode name
        mode_options = fetch_dict.get(fetch_mode) or None
        http_options = mode_options if fetch_mode == "http" else None
        headless_options = mode_options if fetch_mode.startswith("headless") else None

        listing_rules = self._parse_rules(config_path, data.get("listing"), "listing")
        if not any(r.is_many or r.field_name == "links" for r in listing_rules):
            raise ConfigError(config_path, "listing needs a 'links' rule or a rule with multiplicity: many")

        article_rules = self._parse_rules(config_path, data.get("article"), "article")
        unknown = [r.field_name for r in article_rules if r.field_name not in ARTICLE_FIELDS]
        if unknown:
            raise ConfigError(config_path, f"unknown article fields {unknown!r}; expected {list(ARTICLE_FIELDS)!r}")
        if "body" not in [r.field_name for r in article_rules]:
            raise ConfigError(config_path, "article.body rule is required")

        output = data.get("output") or {}
        output_mode = str(output.get("mode", WriteMode.OVERWRITE.value)).strip().lower()
        if output_mode not in [m.value for m in WriteMode]:
            raise ConfigError(config_path, f"unknown output.mode {output_mode!r}")

        retries = data.get("retries")
        if retries is not None and (not isinstance(retries, int) or retries < 0):
            raise ConfigError(config_path, "retries must be an integer >= 0")

        return CrawlerConfig(
            name=data.get("name") or os.path.splitext(os.path.basename(config_path))[0],
            config_path=os.path.basename(config_path),
            base_url=base_url,
            page_count=page_count,
            page_param=data.get("page_param", "page"),
            stop_on_empty_page=data.get("stop_on_empty_page", False),
            delay_seconds=self._optional_float(config_path, data.get("delay_seconds"), "delay_seconds"),
            retries=retries,
            listing_rules=listing_rules,
            article_rules=article_rules,
            fetch_mode=fetch_mode,
            http_options=http_options,
            headless_options=headless_options,
            output_path=output.get("path"),
            output_mode=output_mode,
        )

    def _optional_float(self, config_path: str, value, name: str) -> Optional[float]:
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(config_path, f"{name} must be a number")

    def _parse_rules(self, config_path: str, section, section_name: str) -> list[ExtractionRule]:
        if not isinstance(section, dict) or not section:
            raise ConfigError(config_path, f"{section_name} rules are required")
        return [self._parse_rule(config_path, f"{section_name}.{name}", name, raw) for name, raw in section.items()]

    def _parse_rule(self, config_path: str, where: str, name: str, raw) -> ExtractionRule:
        # A bare string is shorthand for a single-match text rule
        if isinstance(raw, str):
            raw = {"selector": raw}
        if not isinstance(raw, dict):
            raise ConfigError(config_path, f"{where} must be a selector string or a mapping")

        selector = str(raw.get("selector") or "")
        if selector.strip():
            try:
                soupsieve.compile(selector)
            except soupsieve.SelectorSyntaxError as e:
                raise ConfigError(config_path, f"{where}: invalid CSS selector {selector!r} ({e})") from e

        multiplicity = str(raw.get("multiplicity", Multiplicity.SINGLE.value)).strip().lower()
        # published_at always holds a date, whether or not the job says so
        parse_date = bool(raw.get("date", False)) or where == f"article.{PUBLISHED_AT_FIELD}"
        try:
            return ExtractionRule(
                field_name=str(name),
                selector=selector,
                multiplicity=Multiplicity(multiplicity),
                attribute=raw.get("attribute"),
                join=bool(raw.get("join", False)),
                parse_date=parse_date,
            )
        except ValueError as e:
            raise ConfigError(config_path, f"{where}: {e}") from e
