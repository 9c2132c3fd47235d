import os

import pytest

from articlecrawl.configs import load_config_file
from articlecrawl.exceptions import ConfigError

EXAMPLE = os.path.join(os.path.dirname(os.path.dirname(__file__)), "configs", "example-tag.yml")


def test_example_job_file_loads():
    cfg = load_config_file(EXAMPLE)
    assert cfg.name == "example-tag"
    assert cfg.fetch_mode == "headless_chromium"
    assert cfg.headless_options["wait_for_selector"] == "article"
    assert [r.field_name for r in cfg.article_rules] == ["title", "published_at", "body"]


def test_missing_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError, match="cannot read"):
        load_config_file(str(tmp_path / "nope.yml"))


def test_invalid_yaml_raises_config_error(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("base_url: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config_file(str(path))
