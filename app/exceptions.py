"""Domain exceptions for the indexing and retrieval pipeline.

Component code raises these; the HTTP layer maps them to status codes in
``app.middleware.error_handler``.
"""


class InsightsError(Exception):
    """Base class for pipeline errors."""

    status_code: int = 500
    title: str = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ── Configuration ──


class EmbeddingModelError(InsightsError):
    """The sentence-embedding model could not be loaded or run."""


class EmbeddingDimensionError(InsightsError):
    """Model output size does not match the collection dimensionality."""


class LLMNotConfiguredError(InsightsError):
    """No language-model credential is available."""

    status_code = 400
    title = "Bad Request"

    def __init__(self, message: str, provider: str = "openai"):
        super().__init__(message)
        self.provider = provider


# ── Vector store ──


class VectorStoreError(InsightsError):
    """Generic vector-store failure."""


class VectorStoreUnavailableError(VectorStoreError):
    """The vector store refused or timed out the connection."""

    status_code = 503
    title = "Service Unavailable"


class FeatureUnavailableError(InsightsError):
    """Vector features were not registered at startup."""

    status_code = 503
    title = "Service Unavailable"


# ── Relational collaborators ──


class JobDescriptionNotFoundError(InsightsError):
    status_code = 404
    title = "Not Found"

    def __init__(self, job_description_id: str):
        super().__init__(f"Job description {job_description_id} not found")
        self.job_description_id = job_description_id
