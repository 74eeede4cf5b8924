"""Models for normalized real-estate listings."""

from dataclasses import dataclass, field

DEFAULT_LISTING_TITLE = "Untitled Property"


@dataclass(frozen=True)
class ListingPicture:
    """Picture attached to a listing."""

    url: str
    title: str | None = None


@dataclass(frozen=True)
class ListingRecord:
    """Listing data in the fixed shape returned to callers."""

    title: str = DEFAULT_LISTING_TITLE
    address: str | None = None
    pictures: list[ListingPicture] = field(default_factory=list)
