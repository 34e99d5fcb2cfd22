"""The accounts subgraph: a `User` entity and the `me` query."""
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from graphql import GraphQLError, GraphQLResolveInfo

from .asgi import GraphQL
from .resolver import ResolverMap
from .schema import make_schema
from .utils import execute_async_function, gql

logger = logging.getLogger(__name__)

User = Dict[str, Any]
FetchUserById = Callable[[str], Union[Optional[User], Awaitable[Optional[User]]]]

type_defs = gql(
    """
  type Query {
    me: User
  }

  type User @key(fields: "id") {
    id: ID!
    username: String
  }
"""
)

resolvers = ResolverMap()

users = {
    '1': {'id': '1', 'username': '@ava'},
}


def fetch_user_by_id(id: str) -> Optional[User]:
    user = users.get(id)
    return dict(user) if user else None


@resolvers.query('me')
def get_me(_, info: GraphQLResolveInfo) -> User:
    return {'id': '1', 'username': '@ava'}


@resolvers.reference_resolver('User')
async def user_reference(_, info: GraphQLResolveInfo, representation: dict) -> Optional[User]:
    fetch: Optional[FetchUserById] = info.context.get('fetch_user_by_id')
    if fetch is None:
        raise GraphQLError('fetch_user_by_id is not available in the request context.')
    return await execute_async_function(fetch, representation['id'])


schema = make_schema(type_defs, resolvers, federation=True)


def create_app(fetch_user_by_id: FetchUserById = fetch_user_by_id, debug: bool = False) -> GraphQL:
    logger.debug('Creating accounts app with %r', fetch_user_by_id)
    return GraphQL(schema, context={'fetch_user_by_id': fetch_user_by_id}, debug=debug)


app = create_app()
