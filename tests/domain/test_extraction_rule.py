import pytest

from articlecrawl.domain.extraction_rule import ExtractionRule, Multiplicity


def test_defaults_to_single_text_rule():
    rule = ExtractionRule("title", "h1")
    assert rule.multiplicity is Multiplicity.SINGLE
    assert rule.attribute is None
    assert not rule.is_many


def test_selector_is_required():
    with pytest.raises(ValueError, match="selector is required"):
        ExtractionRule("title", " ")


def test_join_requires_many():
    with pytest.raises(ValueError, match="join only applies"):
        ExtractionRule("body", "p", join=True)
