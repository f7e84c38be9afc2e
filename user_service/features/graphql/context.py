"""Per-request GraphQL context, built by ``get_context`` in the router.

Resolvers reach the request-scoped session and the caller's
``RequestContext`` through ``info.context``:

    @strawberry.field
    async def user(self, info: Info[GraphQLContext, None], id: UUID) -> UserType:
        service = UserService(info.context.session)
        return UserType.from_model(await service.get_user(id))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

from user_service.core.context import RequestContext

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class GraphQLContext(BaseContext):
    # BaseContext.__init__ leaves request/response/background_tasks unset;
    # strawberry fills them in when the context is returned from get_context
    session: AsyncSession | None = None
    request_context: RequestContext = field(default_factory=RequestContext)

    def __post_init__(self) -> None:
        super().__init__()
