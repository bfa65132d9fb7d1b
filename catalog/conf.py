from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_MONGO_URI = "mongodb://localhost:27017/"
DEFAULT_COLLECTION = "movies"
DEFAULT_WORKERS = 4


def mongo_uri():
    return getattr(settings, "MONGO_URI", None) or DEFAULT_MONGO_URI


def mongo_db_name():
    name = getattr(settings, "MONGO_DB_NAME", None)
    if not name:
        raise ImproperlyConfigured("settings.MONGO_DB_NAME is missing")
    return name


def movies_collection_name():
    return getattr(settings, "MONGO_MOVIES_COLLECTION", None) or DEFAULT_COLLECTION


def worker_count():
    return int(getattr(settings, "MOVIE_CATALOG_WORKERS", DEFAULT_WORKERS))
