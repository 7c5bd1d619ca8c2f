"""
Assembles the GraphQL schema from the per-domain endpoint modules.
"""
from typing import Any, AsyncGenerator, Optional

import strawberry
from graphql import GraphQLError
from strawberry.tools import merge_types
from strawberry.types import ExecutionContext, ExecutionResult

from marketplace.api.endpoints.auth import AuthMutation
from marketplace.api.endpoints.listings import (
    ListingMutation,
    ListingQuery,
    ListingSubscription,
)
from marketplace.api.endpoints.orders import OrderMutation, OrderQuery, OrderSubscription
from marketplace.api.endpoints.users import UserMutation, UserQuery
from marketplace.api.errors import ShapedGraphQLError, log_graphql_errors

Query = merge_types("Query", (UserQuery, ListingQuery, OrderQuery))
Mutation = merge_types("Mutation", (UserMutation, AuthMutation, ListingMutation, OrderMutation))
Subscription = merge_types("Subscription", (ListingSubscription, OrderSubscription))


class MarketplaceSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: Optional[ExecutionContext] = None,
    ) -> None:
        log_graphql_errors(errors)

    async def subscribe(self, *args: Any, **kwargs: Any) -> AsyncGenerator[ExecutionResult, None]:
        """
        Subscribe as usual, but give every error the API's shape so websocket
        clients see the same ``{message, code, details}`` as HTTP clients.
        """
        results = await super().subscribe(*args, **kwargs)
        return _shape_errors(results)


async def _shape_errors(
    results: AsyncGenerator[ExecutionResult, None],
) -> AsyncGenerator[ExecutionResult, None]:
    try:
        async for result in results:
            if result.errors:
                result.errors = [ShapedGraphQLError.from_error(err) for err in result.errors]
            yield result
    finally:
        await results.aclose()


schema = MarketplaceSchema(query=Query, mutation=Mutation, subscription=Subscription)
