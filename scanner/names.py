"""Folder-name parsing helpers.

Both helpers are total: malformed names never raise, they simply yield an
empty title or ``None`` fields.
"""
from __future__ import annotations

import re

from .types import EpisodeNumbers, TitleYear

_QUALITY_TOKENS = (
    "360p",
    "480p",
    "720p",
    "1080p",
    "1440p",
    "2160p",
    "4k",
    "web-dl",
    "webrip",
    "bluray",
    "dvdrip",
    "brrip",
    "hdtv",
    "remux",
    "x264",
    "x265",
    "h264",
    "h265",
    "hevc",
    "yify",
    "rarbg",
)

_QUALITY_RE = re.compile(
    r"(?<![a-z0-9])(?:" + "|".join(re.escape(token) for token in _QUALITY_TOKENS) + r")(?![a-z0-9])",
    re.IGNORECASE,
)
_BRACKETED_RE = re.compile(r"[\[({].*?[\])}]")
_YEAR_RE = re.compile(r"(?<![A-Za-z0-9])(\d{4})(?![A-Za-z0-9])")
_SEPARATOR_RE = re.compile(r"[._-]+")
_WHITESPACE_RE = re.compile(r"\s+")

_SEASON_RE = re.compile(r"(?<![a-z])s(?:eason)?[\s._-]*(\d+)", re.IGNORECASE)
_EPISODE_RE = re.compile(r"(?<![a-z])e(?:pisode)?[\s._-]*(\d+)", re.IGNORECASE)


def _capitalize_words(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def extract_title_and_year(folder_name: str) -> TitleYear:
    """Return a cleaned title and the first standalone four digit year."""

    clean = _QUALITY_RE.sub("", str(folder_name or ""))
    clean = _BRACKETED_RE.sub("", clean).strip()

    year = None
    match = _YEAR_RE.search(clean)
    if match:
        year = int(match.group(1))
        clean = (clean[: match.start()] + clean[match.end() :]).strip()

    title = _SEPARATOR_RE.sub(" ", clean)
    title = _WHITESPACE_RE.sub(" ", title).strip()
    return TitleYear(_capitalize_words(title), year)


def parse_episode_path(fragment: str) -> EpisodeNumbers:
    """Parse season/episode numbers from a relative path such as ``Show/Season 01/Episode 02``."""

    text = str(fragment or "")
    season = _SEASON_RE.search(text)
    episode = _EPISODE_RE.search(text)
    return EpisodeNumbers(
        int(season.group(1)) if season else None,
        int(episode.group(1)) if episode else None,
    )


__all__ = ["extract_title_and_year", "parse_episode_path"]
