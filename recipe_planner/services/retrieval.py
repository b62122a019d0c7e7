"""Hybrid retrieval: catalog first, synthesis for the shortfall.

retrieve(free_text):
- interpret the text, search the catalog
- catalog_count >= MIN_RESULTS: return the catalog hits unchanged
- otherwise synthesize exactly MIN_RESULTS - catalog_count recipes and append
  them after the catalog hits

Availability wins over completeness: a failed catalog search counts as zero
hits and a failed synthesis batch leaves the result catalog-only.
"""

from typing import Optional

from recipe_planner.models.models import Recipe, SearchResult
from recipe_planner.services.catalog import CatalogSearch
from recipe_planner.services.interpreter import QueryInterpreter
from recipe_planner.services.synthesizer import RecipeSynthesizer
from recipe_planner.utils.config import config
from recipe_planner.utils.errors import StoreError
from recipe_planner.utils.logger import logger


class RetrievalOrchestrator:
    def __init__(
        self,
        interpreter: QueryInterpreter,
        catalog: CatalogSearch,
        synthesizer: RecipeSynthesizer,
        min_results: Optional[int] = None,
    ) -> None:
        self.interpreter = interpreter
        self.catalog = catalog
        self.synthesizer = synthesizer
        self.min_results = min_results if min_results is not None else config.MIN_RESULTS

    async def retrieve(self, free_text: str, creator_id: Optional[str] = None) -> SearchResult:
        """Return catalog matches, topped up with synthesized recipes when short.

        Raises:
            ValueError: `free_text` is empty or whitespace.
        """
        if not free_text or not free_text.strip():
            raise ValueError("Search query is required")
        query = free_text.strip()

        structured = await self.interpreter.interpret(query)

        try:
            catalog_hits = await self.catalog.search(structured, query)
        except StoreError as e:
            logger.error(f"Catalog search failed, treating as no results: {e}", extra={"query": query})
            catalog_hits = []

        if len(catalog_hits) >= self.min_results:
            logger.info(f"Found {len(catalog_hits)} catalog recipes", extra={"query": query})
            return SearchResult(
                query=query,
                recipes=catalog_hits,
                catalog_count=len(catalog_hits),
                generated_count=0,
                interpreted_query=structured,
            )

        deficit = self.min_results - len(catalog_hits)
        logger.info(
            f"Only {len(catalog_hits)} catalog recipes, generating {deficit} more",
            extra={"query": query},
        )

        generated: list[Recipe] = []
        try:
            generated = await self.synthesizer.synthesize(query, deficit, creator_id=creator_id)
        except Exception as e:
            logger.error(f"Recipe synthesis failed, returning catalog results only: {e}", extra={"query": query})

        return SearchResult(
            query=query,
            recipes=[*catalog_hits, *generated],
            catalog_count=len(catalog_hits),
            generated_count=len(generated),
            interpreted_query=structured,
        )
