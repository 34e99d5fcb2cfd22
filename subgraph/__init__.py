from .asgi import GraphQL, GraphQLApp  # noqa
from .resolver import (  # noqa
    ResolverMap,
    default_field_resolver,
    field_resolver,
    mutate,
    query,
    reference_resolver,
)
from .schema import make_schema, make_schema_from_file, make_schema_from_path  # noqa
from .utils import gql  # noqa

__version__ = '0.1.0'
