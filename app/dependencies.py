from functools import lru_cache

from app.services.storage import ImageStorage, create_storage


# One storage client per process; tests swap it out via app.dependency_overrides
@lru_cache()
def get_storage() -> ImageStorage:
    return create_storage()
