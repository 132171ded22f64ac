"""Filesystem walks producing per-kind media inventories."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from store.errors import RemoteStoreError

from .errors import MediaRootError
from .names import extract_title_and_year, parse_episode_path
from .resolutions import detect_resolutions
from .series import SeriesResolver
from .types import AdEntry, EpisodeEntry, MovieEntry, ScanSettings

LOGGER = logging.getLogger("streamflex.scanner.walker")


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def list_subdirs(path: Path) -> List[Path]:
    """Return subdirectories of *path* sorted by name; raises ``OSError``."""

    entries = sorted(path.iterdir(), key=lambda item: item.name)
    return [entry for entry in entries if _is_dir(entry)]


def has_completion_marker(folder: Path, marker: str) -> bool:
    try:
        return (folder / marker).exists()
    except OSError:
        return False


class MediaWalker:
    """Build ``folder key -> entry`` inventories for each media kind."""

    def __init__(self, settings: ScanSettings) -> None:
        self.settings = settings

    def _root_dirs(self, kind: str, root: Path) -> List[Path]:
        try:
            return list_subdirs(root)
        except OSError as exc:
            raise MediaRootError(kind, root, exc.strerror or str(exc)) from exc

    def collect_movies(self) -> Dict[str, MovieEntry]:
        marker = self.settings.completion_marker
        movies: Dict[str, MovieEntry] = {}
        for folder in self._root_dirs("movies", self.settings.movies_root):
            if not has_completion_marker(folder, marker):
                continue
            title, year = extract_title_and_year(folder.name)
            movies[folder.name] = MovieEntry(
                folder_name=folder.name,
                title=title,
                year_released=year,
                resolutions=detect_resolutions(folder),
            )
        LOGGER.info("Found %d valid movie folders on disk.", len(movies))
        return movies

    def collect_episodes(self, resolver: SeriesResolver) -> Dict[str, EpisodeEntry]:
        episodes: Dict[str, EpisodeEntry] = {}
        for series_dir in self._root_dirs("series", self.settings.series_root):
            title = series_dir.name
            try:
                series_record = resolver.resolve(title)
            except RemoteStoreError as exc:
                LOGGER.warning("[Series] could not resolve record for %s: %s", title, exc)
                continue
            series_id = series_record.get("id")
            if not series_id:
                LOGGER.warning("[Series] record for %s has no id; skipping", title)
                continue
            episodes.update(self._collect_series_episodes(series_dir, str(series_id)))
        LOGGER.info("Found %d valid episode folders on disk.", len(episodes))
        return episodes

    def _collect_series_episodes(self, series_dir: Path, series_id: str) -> Dict[str, EpisodeEntry]:
        marker = self.settings.completion_marker
        found: Dict[str, EpisodeEntry] = {}
        try:
            seasons = list_subdirs(series_dir)
        except OSError as exc:
            LOGGER.warning("Could not list series folder %s: %s", series_dir, exc)
            return found
        for season_dir in seasons:
            try:
                episode_dirs = list_subdirs(season_dir)
            except OSError as exc:
                LOGGER.warning("Could not list season folder %s: %s", season_dir, exc)
                continue
            for episode_dir in episode_dirs:
                if not has_completion_marker(episode_dir, marker):
                    continue
                folder_key = "/".join((series_dir.name, season_dir.name, episode_dir.name))
                season, episode = parse_episode_path(folder_key)
                if season is None or episode is None:
                    continue
                found[folder_key] = EpisodeEntry(
                    folder_name=folder_key,
                    series=series_id,
                    season_number=season,
                    episode_number=episode,
                    resolutions=detect_resolutions(episode_dir),
                )
        return found

    def collect_ads(self) -> Dict[str, AdEntry]:
        ads = {folder.name: AdEntry(folder.name) for folder in self._root_dirs("ads", self.settings.ads_root)}
        LOGGER.info("Found %d ad folders on disk.", len(ads))
        return ads


__all__ = ["MediaWalker", "has_completion_marker", "list_subdirs"]
