"""
Authentication operations:
  mutation login(input) – Exchange email/password for a bearer token
  mutation logout       – Close the session behind the current token
"""

import strawberry
from starlette.concurrency import run_in_threadpool
from strawberry.types import Info

from marketplace.schemas.common import MessageResponse
from marketplace.schemas.user import AuthPayload, UserLoginInput, UserType
from marketplace.services.auth_service import AuthService


@strawberry.type
class AuthMutation:
    @strawberry.mutation
    async def login(self, info: Info, input: UserLoginInput) -> AuthPayload:
        # password verification runs off the event loop
        token, user = await run_in_threadpool(AuthService(info.context.store).login, input)
        return AuthPayload(token=token, user=UserType.from_model(user))

    @strawberry.mutation
    def logout(self, info: Info) -> MessageResponse:
        AuthService(info.context.store).logout(info.context.identity, info.context.token)
        return MessageResponse(message="Logout successful")
