import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from catalog import conf
from catalog.exceptions import DuplicateMovieError
from catalog.models import FullMovie, Tag, ThinMovie
from catalog.services import aggregates
from catalog.services.query_builder import (
    build_query,
    coerce_id,
    tag_query,
    title_search_query,
)
from catalog.services.stats import genre_watch_ratios, year_histogram

logger = logging.getLogger(__name__)

FILMOGRAPHY_LIMIT = 2000


def _logged(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except PyMongoError as e:
            logger.error(f"{method.__name__} failed on {self.collection.name}: {e}")
            raise
    return wrapper


class MovieService:
    def __init__(self, collection, workers=None):
        self.collection = collection
        self.workers = workers or conf.worker_count()

    @classmethod
    def from_settings(cls):
        client = MongoClient(conf.mongo_uri())
        db = client[conf.mongo_db_name()]
        return cls(db[conf.movies_collection_name()])

    def ensure_indexes(self):
        self.collection.create_index([("id", ASCENDING)], unique=True)
        self.collection.create_index([("addedToDb", DESCENDING)])
        self.collection.create_index([("release_date", DESCENDING)])
        logger.info(f"Indexes ensured on {self.collection.name}")

    def _find_thin(self, query):
        return [ThinMovie.from_document(doc) for doc in query.cursor(self.collection)]

    def _parallel(self, **calls):
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = {name: pool.submit(call) for name, call in calls.items()}
            return {name: future.result() for name, future in futures.items()}

    # Reads

    @_logged
    def find_one(self, criteria):
        return FullMovie.from_document(self.collection.find_one(criteria))

    def get_by_id(self, movie_id):
        return self.find_one({"id": coerce_id(movie_id)})

    @_logged
    def check_if_exists(self, criteria):
        return self.collection.find_one(criteria, {"_id": 1}) is not None

    @_logged
    def query(self, criteria=None, sort=None, skip=None, limit=None):
        return self._find_thin(build_query(criteria, sort, skip, limit))

    @_logged
    def filmography(self, actor_id):
        query = build_query(
            {"casts.cast.id": coerce_id(actor_id)},
            sort={"release_date": DESCENDING},
            limit=FILMOGRAPHY_LIMIT,
        )
        return self._find_thin(query)

    @_logged
    def search_titles(self, term, limit=None):
        return self._find_thin(title_search_query(term, limit))

    @_logged
    def search_actors(self, term, limit=None):
        return list(self.collection.aggregate(aggregates.search_actors(term, limit)))

    def search(self, term, limit=None):
        return self._parallel(
            movies=lambda: self.search_titles(term, limit),
            actors=lambda: self.search_actors(term, limit),
        )

    @_logged
    def favorites(self):
        return self._find_thin(tag_query(Tag.FAVORITED))

    @_logged
    def queue(self):
        return self._find_thin(tag_query(Tag.QUEUED))

    # Writes

    @_logged
    def insert(self, movie):
        doc = dict(movie)
        doc["id"] = coerce_id(doc["id"])
        if self.check_if_exists({"id": doc["id"]}):
            logger.warning(f"Refusing to insert duplicate movie {doc['id']}")
            raise DuplicateMovieError(doc["id"])

        doc["addedToDb"] = datetime.now(timezone.utc)
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            # another writer got there between the check and the insert
            logger.warning(f"Unique index rejected duplicate movie {doc['id']}")
            raise DuplicateMovieError(doc["id"]) from None
        return FullMovie.from_document(doc)

    @_logged
    def update(self, movie_id, fields):
        return self.collection.update_one({"id": coerce_id(movie_id)}, {"$set": dict(fields)})

    def set_fields(self, movie_id, fields):
        """Set arbitrary, possibly dotted, keys on a movie."""
        return self.update(movie_id, fields)

    def set_tag(self, movie_id, tag, value):
        return self.update(movie_id, {Tag(tag).field: value})

    def toggle_watched(self, movie_id, watched):
        return self.update(movie_id, {"watched": watched})

    @_logged
    def remove(self, movie_id):
        return self.collection.delete_one({"id": coerce_id(movie_id)})

    # Reports

    @_logged
    def genres(self, watched_count=None):
        return list(self.collection.aggregate(aggregates.genres(watched_count)))

    @_logged
    def actors(self, count=None):
        return list(self.collection.aggregate(aggregates.actors(count)))

    @_logged
    def years(self):
        return year_histogram(self.collection.aggregate(aggregates.years()))

    @_logged
    def genre_stats(self):
        return genre_watch_ratios(self.collection.aggregate(aggregates.genre_stats()))

    @_logged
    def count(self, criteria=None):
        return self.collection.count_documents(criteria or {})

    def stats(self, include_genres=True, include_years=True):
        calls = {
            "total": lambda: self.count(),
            "watched": lambda: self.count({"watched": True}),
        }
        if include_genres:
            calls["genres"] = self.genre_stats
        if include_years:
            calls["years"] = self.years

        results = self._parallel(**calls)
        results["unwatched"] = results["total"] - results["watched"]
        return results
