class TransportError(Exception):
    """The priming or search request for a council failed."""

    def __init__(self, url=None, reason=None):
        self.url = url
        self.reason = reason
        super().__init__(f'transport error for {url}: {reason}' if url else reason)


class StorageError(Exception):
    """Writing an application to the database failed, the crawl was stopped."""
