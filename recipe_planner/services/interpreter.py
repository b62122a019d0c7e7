"""Free-text query interpretation.

One gateway call turns "quick vegan dinner with chickpeas" into a
StructuredQuery. Interpretation is fail-open: any gateway, parsing or
validation failure yields an all-empty query, so search falls back to a raw
text match instead of failing the request.
"""

from pydantic import ValidationError

from recipe_planner.gateway.gemini import LanguageModelGateway, ResponseShape
from recipe_planner.models.models import StructuredQuery
from recipe_planner.prompts.prompts import get_query_interpretation_prompt
from recipe_planner.utils.errors import GatewayError, MalformedResponse
from recipe_planner.utils.logger import logger


class QueryInterpreter:
    def __init__(self, gateway: LanguageModelGateway) -> None:
        self.gateway = gateway

    async def interpret(self, free_text: str) -> StructuredQuery:
        prompt = get_query_interpretation_prompt(free_text)
        try:
            parsed = await self.gateway.invoke(prompt, ResponseShape.OBJECT)
            structured = StructuredQuery.model_validate(parsed)
        except (GatewayError, MalformedResponse, ValidationError) as e:
            logger.warning(f"Query interpretation failed, continuing with empty filter: {e}", extra={"query": free_text})
            return StructuredQuery()

        logger.debug(f"Interpreted query: {structured.model_dump(exclude_defaults=True)}", extra={"query": free_text})
        return structured
