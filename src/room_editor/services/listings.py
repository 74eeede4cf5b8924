"""Normalization of scraped listing payloads.

Scraper output differs between actor versions, so every field is resolved by
trying an ordered list of small extractors and keeping the first hit. Nothing
here raises; missing data falls back to defaults.
"""

from collections.abc import Callable

from room_editor.domain.listings import (
    DEFAULT_LISTING_TITLE,
    ListingPicture,
    ListingRecord,
)

Extractor = Callable[[dict[str, object]], object | None]

_PICTURE_KIND = "PICTURE"
_PICTURE_URL_KEYS = ("url", "uri", "src", "imageUrl")
_PICTURE_TITLE_KEYS = ("title", "alt")


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _field(name: str) -> Extractor:
    def extract(raw: dict[str, object]) -> str | None:
        return _text(raw.get(name))

    extract.__name__ = f"field_{name}"
    return extract


def _nested_field(parent: str, name: str) -> Extractor:
    def extract(raw: dict[str, object]) -> str | None:
        container = raw.get(parent)
        if not isinstance(container, dict):
            return None
        return _text(container.get(name))

    extract.__name__ = f"field_{parent}_{name}"
    return extract


def _media_pictures(raw: dict[str, object]) -> list[object] | None:
    media = raw.get("media")
    if not isinstance(media, list):
        return None
    return [
        entry
        for entry in media
        if isinstance(entry, dict)
        and _PICTURE_KIND in (entry.get("type"), entry.get("@type"))
    ]


def _list_field(name: str) -> Callable[[dict[str, object]], list[object] | None]:
    def extract(raw: dict[str, object]) -> list[object] | None:
        value = raw.get(name)
        return value if isinstance(value, list) else None

    extract.__name__ = f"list_{name}"
    return extract


TITLE_EXTRACTORS: tuple[Extractor, ...] = (_field("title"), _field("name"))

ADDRESS_EXTRACTORS: tuple[Extractor, ...] = (
    _nested_field("address", "formattedAddress"),
    _nested_field("address", "description"),
    _field("address"),
    _field("location"),
)

PICTURE_SOURCES: tuple[Callable[[dict[str, object]], list[object] | None], ...] = (
    _media_pictures,
    _list_field("pictures"),
    _list_field("images"),
)


def first_match(raw: dict[str, object], extractors: tuple[Extractor, ...]) -> object:
    """Return the first non-empty value produced by the extractors."""
    for extractor in extractors:
        value = extractor(raw)
        if value is not None:
            return value
    return None


def normalize_picture(entry: object) -> ListingPicture | None:
    """Convert one scraped picture entry, or None when it has no URL."""
    if isinstance(entry, str):
        return ListingPicture(url=entry) if entry.strip() else None
    if not isinstance(entry, dict):
        return None
    url = next(filter(None, (_text(entry.get(key)) for key in _PICTURE_URL_KEYS)), None)
    if url is None:
        return None
    title = next(
        filter(None, (_text(entry.get(key)) for key in _PICTURE_TITLE_KEYS)), None
    )
    return ListingPicture(url=url, title=title)


def normalize_listing(raw: object) -> ListingRecord:
    """Map a scraped item into a ListingRecord."""
    if not isinstance(raw, dict):
        return ListingRecord()
    title = first_match(raw, TITLE_EXTRACTORS)
    address = first_match(raw, ADDRESS_EXTRACTORS)
    entries = first_match(raw, PICTURE_SOURCES) or []
    pictures = [
        picture
        for picture in (normalize_picture(entry) for entry in entries)
        if picture is not None
    ]
    return ListingRecord(
        title=title if isinstance(title, str) else DEFAULT_LISTING_TITLE,
        address=address if isinstance(address, str) else None,
        pictures=pictures,
    )
