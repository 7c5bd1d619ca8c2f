"""
GraphQL router – serves queries and mutations over HTTP and subscriptions over websockets.
"""
from fastapi import Request
import logging

from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.types import ExecutionResult

from marketplace.api.context import get_context
from marketplace.api.errors import format_graphql_error
from marketplace.api.schema import schema
from marketplace.core.config import settings

logger = logging.getLogger(__name__)


class MarketplaceGraphQLRouter(GraphQLRouter):
    """GraphQL router that renders errors as ``{message, code, details}``."""

    async def process_result(
        self, request: Request, result: ExecutionResult
    ) -> GraphQLHTTPResponse:
        response: GraphQLHTTPResponse = {"data": result.data}
        if result.errors:
            response["errors"] = [format_graphql_error(err) for err in result.errors]
        return response


def build_graphql_router() -> GraphQLRouter:
    logger.info("Building GraphQL router (graphiql=%s)", settings.GRAPHIQL_ENABLED)
    return MarketplaceGraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.GRAPHIQL_ENABLED else None,
    )
