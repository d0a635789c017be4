"""Tests for environment-driven options."""

import pytest

from mindmap.config import DEFAULT_FRAMEWORK_PREFIXES, MindmapOptions, load_log_level, load_options

ENV_VARS = [
    "MINDMAP_DEFAULT_VIEW",
    "MINDMAP_THEME",
    "MINDMAP_ENABLE_EXPORT",
    "MINDMAP_TITLE",
    "MINDMAP_ENABLE_CACHING",
    "MINDMAP_ENABLE_DATABASE_ANALYZER",
    "MINDMAP_MAX_UNWRAP_DEPTH",
    "MINDMAP_FRAMEWORK_PREFIXES",
    "MINDMAP_DEFAULT_SCHEMA",
    "MINDMAP_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    options = load_options()

    assert options == MindmapOptions()
    assert options.max_unwrap_depth == 4
    assert options.default_schema == "dbo"
    assert tuple(options.framework_prefixes) == DEFAULT_FRAMEWORK_PREFIXES


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("MINDMAP_DEFAULT_VIEW", "Tree")
    monkeypatch.setenv("MINDMAP_THEME", "dark")
    monkeypatch.setenv("MINDMAP_ENABLE_EXPORT", "no")
    monkeypatch.setenv("MINDMAP_TITLE", "Shop API")
    monkeypatch.setenv("MINDMAP_ENABLE_DATABASE_ANALYZER", "true")
    monkeypatch.setenv("MINDMAP_MAX_UNWRAP_DEPTH", "2")
    monkeypatch.setenv("MINDMAP_FRAMEWORK_PREFIXES", "shop.internal, vendor")
    monkeypatch.setenv("MINDMAP_DEFAULT_SCHEMA", "public")

    options = load_options()

    assert options.default_view == "tree"
    assert options.theme == "dark"
    assert options.enable_export is False
    assert options.title == "Shop API"
    assert options.enable_database_analyzer is True
    assert options.max_unwrap_depth == 2
    assert options.framework_prefixes == ["shop.internal", "vendor"]
    assert options.default_schema == "public"


@pytest.mark.parametrize(
    "name, value, attribute, expected",
    [
        ("MINDMAP_THEME", "neon", "theme", "light"),
        ("MINDMAP_DEFAULT_VIEW", "graph", "default_view", "mindmap"),
        ("MINDMAP_ENABLE_CACHING", "maybe", "enable_caching", True),
        ("MINDMAP_MAX_UNWRAP_DEPTH", "deep", "max_unwrap_depth", 4),
        ("MINDMAP_MAX_UNWRAP_DEPTH", "0", "max_unwrap_depth", 4),
        ("MINDMAP_FRAMEWORK_PREFIXES", " , ", "framework_prefixes", list(DEFAULT_FRAMEWORK_PREFIXES)),
    ],
)
def test_invalid_values_fall_back_to_defaults(monkeypatch, name, value, attribute, expected):
    monkeypatch.setenv(name, value)
    assert getattr(load_options(), attribute) == expected


def test_ui_settings_hide_extraction_options():
    settings = MindmapOptions(theme="dark").ui_settings()

    assert settings == {
        "default_view": "mindmap",
        "theme": "dark",
        "enable_export": True,
        "title": "API Mindmap",
        "enable_caching": True,
        "enable_database_analyzer": False,
    }


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "INFO"),
        ("debug", "DEBUG"),
        ("Warning", "WARNING"),
        ("VERBOSE", "INFO"),
        ("", "INFO"),
    ],
)
def test_log_level(monkeypatch, value, expected):
    if value is not None:
        monkeypatch.setenv("MINDMAP_LOG_LEVEL", value)
    assert load_log_level() == expected
