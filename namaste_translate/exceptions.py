"""Translation error taxonomy.

Each error carries the offending query value and a message that is safe to
return to the caller. Enrichment failures are not exceptions: they are
reported as ``UnstructuredEnrichment`` data.
"""


class TranslationError(Exception):
    """Base class for failures that end a translation request."""

    status_code = 500

    def __init__(self, message: str, query: str = ""):
        super().__init__(message)
        self.message = message
        self.query = query


class InvalidQuery(TranslationError):
    """Missing or empty required input."""

    status_code = 400


class NotFound(TranslationError):
    """Nothing matched after applying the resolution strategy."""

    status_code = 404


class StoreUnavailable(TranslationError):
    """The backing mapping store could not be reached."""

    status_code = 503
