import yaml

from articlecrawl.domain.config import CrawlerConfig
from articlecrawl.exceptions import ConfigError
from articlecrawl.services.crawler_config_parser import CrawlerConfigParser


def load_config_file(path: str, parser: CrawlerConfigParser = None) -> CrawlerConfig:
    """Read a crawl job YAML file and parse it into a CrawlerConfig.

    Raises ConfigError when the file is missing, is not valid YAML, or fails
    validation.
    """
    parser = parser or CrawlerConfigParser()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(path, f"cannot read file ({e})") from e
    except yaml.YAMLError as e:
        raise ConfigError(path, f"invalid YAML ({e})") from e
    return parser.parse(config_path=path, data=data)
