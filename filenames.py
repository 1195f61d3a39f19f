# filenames.py
"""
Best-effort episode titles from upload file names.

Uploaders follow a handful of conventions, for example::

    Show.Name.S01E05.The.Title.1080p.CR.WEB-DL.JPN.mkv  -> The Title
    Show_Ep_05_The_Title_SUB_ITA.mp4                    -> The Title
    Show ep 05 The Title.mp4                            -> The Title

Anything that does not match, or that only leaves technical tags behind,
yields an empty string and the caller falls back to "Episodio N".
"""
import re

EPISODE_NAME_PATTERN = re.compile(
    r"""
    \.S\d+E\d+\.(?P<tagged>.+?)
        (?:\.\d+p|\.CR\.WEB-DL|\.WEB-DL|\.JPN|\.ITA|\.AAC2\.0|\.H\.264|\.mkv|\.AMZN)
    | Ep_\d+_(?P<underscored>.+?)(?:_SUB_ITA|\.mp4|\.mkv)
    | ep\s+\d+\s+(?P<spaced>.+?)(?:\.mp4|\.mkv)
    """,
    re.VERBOSE,
)
EPISODIO_PREFIX = re.compile(r'^Episodio\s+\d+\s*-?\s*', re.IGNORECASE)
RESOLUTION_TAG = re.compile(r'\d+p')

TECHNICAL_TOKENS = {
    "cr", "web-dl", "webrip", "jpn", "ita", "eng", "aac", "aac2.0", "h.264", "h264",
    "x264", "x265", "hevc", "mkv", "mp4", "amzn", "nf", "sub", "dub", "bluray", "bdrip",
}


def is_meaningful_word(word: str) -> bool:
    if len(word) <= 2:
        return False
    if word.lower() in TECHNICAL_TOKENS:
        return False
    return not RESOLUTION_TAG.search(word)


def extract_episode_name_from_file_name(file_name: str) -> str:
    if not file_name:
        return ""

    match = EPISODE_NAME_PATTERN.search(file_name)
    if not match:
        return ""

    candidate = match.group('tagged') or match.group('underscored') or match.group('spaced') or ""
    candidate = candidate.replace('.', ' ').replace('_', ' ').strip()
    candidate = EPISODIO_PREFIX.sub('', candidate).strip()

    if not any(is_meaningful_word(word) for word in candidate.split(' ')):
        return ""
    return candidate
