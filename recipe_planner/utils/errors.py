"""Exception taxonomy for the retrieval, synthesis and planning pipeline."""


class RecipePlannerError(Exception):
    """Base class for all pipeline errors."""


class GatewayError(RecipePlannerError):
    """Model call or transport failure after retries were exhausted (or a non-retryable failure)."""


class MalformedResponse(RecipePlannerError):
    """Model output did not contain parsable JSON of the expected shape."""


class StoreError(RecipePlannerError):
    """Persistence layer failure."""


class SynthesisError(RecipePlannerError):
    """A synthesis batch could not produce any recipe."""


class InsufficientCorpus(RecipePlannerError):
    """Meal plan requested over an empty recipe corpus."""


class GenerationError(RecipePlannerError):
    """Meal plan assembly failed and no deterministic fallback exists."""
