import pytest

from tractive_exporter.cli import apply_cli_overrides, build_parser, parse_listen_address
from tractive_exporter.config.settings import (
    Settings,
    TractiveSettings,
    _apply_env_overrides,
    get_settings,
    split_tracker_ids,
)


def test_split_tracker_ids_merges_and_drops_empty_entries():
    assert split_tracker_ids("AAA,,BBB", None, "", " CCC ,AAA,") == ["AAA", "BBB", "CCC"]


def test_env_shares_are_appended_to_configured_ones(monkeypatch):
    monkeypatch.setenv("TRACTIVE_PUBLIC_SHARES", "BBB,,CCC")
    monkeypatch.setenv("TRACTIVE_LOG_LEVEL", "debug")

    data = _apply_env_overrides({"tractive": {"public_shares": ["AAA", "BBB"]}})

    assert data["tractive"]["public_shares"] == ["AAA", "BBB", "CCC"]
    assert data["app"]["log_level"] == "debug"


def test_packaged_defaults_load(monkeypatch):
    monkeypatch.delenv("TRACTIVE_CONFIG_PATH", raising=False)
    monkeypatch.delenv("TRACTIVE_PUBLIC_SHARES", raising=False)
    monkeypatch.delenv("TRACTIVE_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()

    assert settings.tractive.host == "graph.tractive.com"
    assert settings.tractive.verify_tls is False
    assert settings.web.listen_address == ":9101"
    assert settings.web.metrics_path == "/metrics"
    assert settings.geo.geohash_precision == 8


def test_external_config_file_replaces_defaults(monkeypatch, tmp_path):
    path = tmp_path / "tractive.yaml"
    path.write_text("tractive:\n  public_shares: AAA,BBB\nweb:\n  metrics_path: scrape\n", encoding="utf-8")
    monkeypatch.setenv("TRACTIVE_CONFIG_PATH", str(path))
    monkeypatch.delenv("TRACTIVE_PUBLIC_SHARES", raising=False)
    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()

    assert settings.tractive.public_shares == ["AAA", "BBB"]
    assert settings.web.metrics_path == "/scrape"


def test_cli_flags_merge_with_settings():
    settings = Settings(tractive=TractiveSettings(public_shares=["AAA"]))
    args = build_parser().parse_args(
        ["--trackers.list", "BBB,,AAA", "--web.port", "127.0.0.1:9200", "--web.path", "/tractive", "--log-level", "DEBUG"]
    )

    out = apply_cli_overrides(settings, args)

    assert out.tractive.public_shares == ["AAA", "BBB"]
    assert out.web.listen_address == "127.0.0.1:9200"
    assert out.web.metrics_path == "/tractive"
    assert out.app.log_level == "DEBUG"
    # The input model is shared (cached); it must not change.
    assert settings.tractive.public_shares == ["AAA"]


def test_cli_defaults_keep_settings():
    settings = Settings()
    out = apply_cli_overrides(settings, build_parser().parse_args([]))

    assert out.web.listen_address == ":9101"
    assert out.web.metrics_path == "/metrics"
    assert out.tractive.public_shares == []


@pytest.mark.parametrize(
    ("value", "expected"),
    [(":9101", ("0.0.0.0", 9101)), ("127.0.0.1:9200", ("127.0.0.1", 9200)), ("[::1]:9101", ("::1", 9101))],
)
def test_parse_listen_address(value, expected):
    assert parse_listen_address(value) == expected


@pytest.mark.parametrize("value", ["9101", "localhost:", "host:port"])
def test_parse_listen_address_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_listen_address(value)
