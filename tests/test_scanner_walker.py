from __future__ import annotations

import pytest

from scanner import walker as walker_module
from scanner.errors import MediaRootError
from scanner.series import SeriesResolver
from scanner.walker import MediaWalker
from store.errors import RemoteStoreError

from conftest import make_media_dir


def test_collect_movies_requires_completion_marker(scan_settings):
    root = scan_settings.movies_root
    make_media_dir(root, "The.Matrix.1999.1080p.BluRay.x264", renditions=["1080p", "720p"])
    make_media_dir(root, "Half.Encoded.2021", marker=False, renditions=["1080p"])
    (root / "notes.txt").write_text("not a folder", encoding="utf-8")

    movies = MediaWalker(scan_settings).collect_movies()

    assert list(movies) == ["The.Matrix.1999.1080p.BluRay.x264"]
    entry = movies["The.Matrix.1999.1080p.BluRay.x264"]
    assert entry.title == "The Matrix"
    assert entry.year_released == 1999
    assert entry.resolutions == [720, 1080]
    assert entry.to_payload() == {
        "title": "The Matrix",
        "year_released": 1999,
        "resolutions": [720, 1080],
        "folder_name": "The.Matrix.1999.1080p.BluRay.x264",
    }


def test_collect_movies_keeps_dot_prefixed_folders(scan_settings):
    make_media_dir(scan_settings.movies_root, "Alien 1979")
    make_media_dir(scan_settings.movies_root, ".hack Quarantine")

    assert list(MediaWalker(scan_settings).collect_movies()) == [".hack Quarantine", "Alien 1979"]


def test_collect_ads_keeps_dot_prefixed_folders(scan_settings):
    make_media_dir(scan_settings.ads_root, ".intro", marker=False)

    assert list(MediaWalker(scan_settings).collect_ads()) == [".intro"]


def test_collect_movies_missing_root_raises(scan_settings, tmp_path):
    scan_settings.movies_root = tmp_path / "unmounted"

    with pytest.raises(MediaRootError) as excinfo:
        MediaWalker(scan_settings).collect_movies()
    assert excinfo.value.kind == "movies"


def test_collect_episodes_builds_relative_keys(scan_settings, store):
    root = scan_settings.series_root
    make_media_dir(root, "Breaking Bad", "Season 02", "Episode 05", renditions=["720p"])
    make_media_dir(root, "Breaking Bad", "Season 02", "Episode 06", marker=False)
    make_media_dir(root, "Breaking Bad", "Extras", "Bonus")

    resolver = SeriesResolver(store, scan_settings.series_collection)
    episodes = MediaWalker(scan_settings).collect_episodes(resolver)

    series = store.get_first("series", "title", "Breaking Bad")
    assert list(episodes) == ["Breaking Bad/Season 02/Episode 05"]
    entry = episodes["Breaking Bad/Season 02/Episode 05"]
    assert entry.series == series["id"]
    assert (entry.season_number, entry.episode_number) == (2, 5)
    assert entry.resolutions == [720]
    assert entry.title == "Season 2 Episode 5"
    assert resolver.created == 1


def test_collect_episodes_reuses_existing_series(scan_settings, store):
    existing = store.create("series", {"title": "Dark"})
    make_media_dir(scan_settings.series_root, "Dark", "S01", "S01E01")
    make_media_dir(scan_settings.series_root, "Dark", "S01", "S01E02")

    resolver = SeriesResolver(store, "series")
    episodes = MediaWalker(scan_settings).collect_episodes(resolver)

    assert {entry.series for entry in episodes.values()} == {existing["id"]}
    assert resolver.created == 0
    assert store.calls.count(("get_first", "series")) == 1


def test_series_resolver_caches_within_a_pass(store):
    resolver = SeriesResolver(store, "series")

    first = resolver.resolve("Severance")
    second = resolver.resolve("Severance")

    assert first["id"] == second["id"]
    assert store.calls == [("get_first", "series"), ("create", "series")]


def test_collect_episodes_skips_series_that_cannot_be_resolved(scan_settings, store):
    make_media_dir(scan_settings.series_root, "Broken", "Season 1", "Episode 1")
    make_media_dir(scan_settings.series_root, "Fine", "Season 1", "Episode 1")

    class FlakyResolver(SeriesResolver):
        def resolve(self, title):
            if title == "Broken":
                raise RemoteStoreError("boom", status=500)
            return super().resolve(title)

    episodes = MediaWalker(scan_settings).collect_episodes(FlakyResolver(store, "series"))

    assert list(episodes) == ["Fine/Season 1/Episode 1"]


def test_collect_episodes_skips_unreadable_season(scan_settings, store, monkeypatch):
    root = scan_settings.series_root
    make_media_dir(root, "Dark", "Season 1", "Episode 1")
    make_media_dir(root, "Dark", "Season 2", "Episode 1")
    make_media_dir(root, "Lost", "Season 1", "Episode 1")
    unreadable = root / "Dark" / "Season 2"
    real_list_subdirs = walker_module.list_subdirs

    def flaky_list_subdirs(path):
        if path == unreadable:
            raise PermissionError(13, "Permission denied", str(path))
        return real_list_subdirs(path)

    monkeypatch.setattr(walker_module, "list_subdirs", flaky_list_subdirs)

    episodes = MediaWalker(scan_settings).collect_episodes(SeriesResolver(store, "series"))

    assert list(episodes) == ["Dark/Season 1/Episode 1", "Lost/Season 1/Episode 1"]


def test_collect_episodes_skips_unreadable_series(scan_settings, store, monkeypatch):
    root = scan_settings.series_root
    make_media_dir(root, "Dark", "Season 1", "Episode 1")
    make_media_dir(root, "Lost", "Season 1", "Episode 1")
    unreadable = root / "Dark"
    real_list_subdirs = walker_module.list_subdirs

    def flaky_list_subdirs(path):
        if path == unreadable:
            raise OSError(5, "Input/output error", str(path))
        return real_list_subdirs(path)

    monkeypatch.setattr(walker_module, "list_subdirs", flaky_list_subdirs)

    episodes = MediaWalker(scan_settings).collect_episodes(SeriesResolver(store, "series"))

    assert list(episodes) == ["Lost/Season 1/Episode 1"]
    assert store.keys("series", "title") == {"Dark", "Lost"}


def test_collect_ads_needs_no_marker(scan_settings):
    make_media_dir(scan_settings.ads_root, "summer-promo", marker=False)
    make_media_dir(scan_settings.ads_root, "bumper")

    ads = MediaWalker(scan_settings).collect_ads()

    assert list(ads) == ["bumper", "summer-promo"]
    assert ads["bumper"].to_payload() == {"folder_name": "bumper"}
