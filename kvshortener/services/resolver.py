from kvshortener.dao.base import ShortURLBaseDAO


class Resolver:
    """Resolve short codes into their target URLs with a single point lookup

    Codes aren't decoded: the code itself is the storage key.
    """

    def __init__(self, dao: ShortURLBaseDAO):
        self.dao = dao

    def resolve(self, code: str) -> str:
        """Return the target URL of a code

        Raises:
            ShortURLNotFoundError: if the code is unknown (a NotFoundError).
            DataStoreError: on any other store failure (a StoreUnavailableError).
        """
        return self.dao.get(code).target
