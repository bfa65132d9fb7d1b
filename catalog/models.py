from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Tag(str, Enum):
    FAVORITED = "favorited"
    QUEUED = "queued"
    WATCHED = "watched"

    @property
    def field(self):
        return f"tags.{self.value}"


@dataclass
class Genre:
    name: str
    id: Optional[int] = None

    @classmethod
    def from_document(cls, doc):
        return cls(name=doc.get("name"), id=doc.get("id"))


@dataclass
class CastMember:
    id: int
    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=doc.get("id"),
            name=doc.get("name"),
            character=doc.get("character"),
            profile_path=doc.get("profile_path"),
        )


def _genres(doc):
    return [Genre.from_document(g) for g in doc.get("genres") or []]


def _cast(doc):
    casts = doc.get("casts") or {}
    return [CastMember.from_document(c) for c in casts.get("cast") or []]


# Fields returned by list and search queries
THIN_FIELDS = (
    "id",
    "title",
    "release_date",
    "poster_path",
    "genres",
    "watched",
    "tags",
    "addedToDb",
)


def thin_projection():
    projection = {name: 1 for name in THIN_FIELDS}
    projection["_id"] = 0
    return projection


@dataclass
class ThinMovie:
    """Reduced movie record used in list contexts."""

    id: int
    title: str
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    genres: List[Genre] = field(default_factory=list)
    watched: bool = False
    tags: Dict[str, Any] = field(default_factory=dict)
    addedToDb: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=doc.get("id"),
            title=doc.get("title"),
            release_date=doc.get("release_date"),
            poster_path=doc.get("poster_path"),
            genres=_genres(doc),
            watched=bool(doc.get("watched")),
            tags=dict(doc.get("tags") or {}),
            addedToDb=doc.get("addedToDb"),
        )

    def to_dict(self):
        return asdict(self)


@dataclass
class FullMovie:
    """Complete movie record, as returned for single-item retrieval.

    Fields the catalog does not know about are kept in ``extra`` so that
    nothing stored in the document is lost on the way out.
    """

    id: int
    title: str
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    overview: Optional[str] = None
    genres: List[Genre] = field(default_factory=list)
    cast: List[CastMember] = field(default_factory=list)
    watched: bool = False
    tags: Dict[str, Any] = field(default_factory=dict)
    addedToDb: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    KNOWN_FIELDS = frozenset(
        ["_id", "id", "title", "release_date", "poster_path", "overview",
         "genres", "casts", "watched", "tags", "addedToDb"]
    )

    @classmethod
    def from_document(cls, doc):
        if doc is None:
            return None
        extra = {k: v for k, v in doc.items() if k not in cls.KNOWN_FIELDS}
        return cls(
            id=doc.get("id"),
            title=doc.get("title"),
            release_date=doc.get("release_date"),
            poster_path=doc.get("poster_path"),
            overview=doc.get("overview"),
            genres=_genres(doc),
            cast=_cast(doc),
            watched=bool(doc.get("watched")),
            tags=dict(doc.get("tags") or {}),
            addedToDb=doc.get("addedToDb"),
            extra=extra,
        )

    def to_dict(self):
        return asdict(self)
