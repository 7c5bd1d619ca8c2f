"""
User operations:
  query    user(id)              – Public profile of a user
  mutation createUser(input)     – Register a new account
  mutation updateUser(id, input) – Update your own profile
  mutation deleteUser(id)        – Delete your own account

Registration and profile updates hash passwords, so they run in the threadpool
instead of on the event loop.
"""
import strawberry
from starlette.concurrency import run_in_threadpool
from strawberry.types import Info

from marketplace.schemas.common import MessageResponse
from marketplace.schemas.user import UserCreateInput, UserType, UserUpdateInput
from marketplace.services.user_service import UserService


@strawberry.type
class UserQuery:
    @strawberry.field
    def user(self, info: Info, id: int) -> UserType:
        return UserType.from_model(UserService(info.context.store).get_user(id))


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def create_user(self, info: Info, input: UserCreateInput) -> UserType:
        service = UserService(info.context.store)
        return UserType.from_model(await run_in_threadpool(service.register_user, input))

    @strawberry.mutation
    async def update_user(self, info: Info, id: int, input: UserUpdateInput) -> UserType:
        service = UserService(info.context.store)
        user = await run_in_threadpool(service.update_user, id, input, info.context.identity)
        return UserType.from_model(user)

    @strawberry.mutation
    def delete_user(self, info: Info, id: int) -> MessageResponse:
        UserService(info.context.store).delete_user(id, info.context.identity)
        return MessageResponse(message="User deleted successfully")
