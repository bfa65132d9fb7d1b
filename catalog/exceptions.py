class CatalogError(Exception):
    """Base class for errors raised by the movie catalog."""


class DuplicateMovieError(CatalogError):
    def __init__(self, movie_id):
        self.movie_id = movie_id
        super().__init__(f"Movie {movie_id} already exists")
