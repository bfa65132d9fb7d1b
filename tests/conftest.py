import mongomock
import pytest
from django.conf import settings

from catalog.services.mongo_service import MovieService

if not settings.configured:
    settings.configure(
        MONGO_URI="mongodb://localhost:27017/",
        MONGO_DB_NAME="catalog_test",
        MONGO_MOVIES_COLLECTION="movies",
        MOVIE_CATALOG_WORKERS=2,
    )


@pytest.fixture
def collection():
    """Fresh in-memory movies collection for each test."""
    client = mongomock.MongoClient()
    yield client["catalog_test"]["movies"]
    client.close()


@pytest.fixture
def service(collection):
    return MovieService(collection)


def make_movie(movie_id, title, genres=(), cast=(), release_date="2000-01-01", **extra):
    doc = {
        "id": movie_id,
        "title": title,
        "release_date": release_date,
        "poster_path": f"/{movie_id}.jpg",
        "genres": [{"id": i, "name": name} for i, name in enumerate(genres)],
        "casts": {"cast": [
            {"id": actor_id, "name": name, "profile_path": f"/p{actor_id}.jpg"}
            for actor_id, name in cast
        ]},
        "tags": {},
        "watched": False,
    }
    doc.update(extra)
    return doc
