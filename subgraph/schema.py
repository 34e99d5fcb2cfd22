from pathlib import Path
from typing import List, Union, cast

from graphql import GraphQLObjectType, GraphQLSchema, GraphQLUnionType, build_schema, parse

from .federation import (
    federation_entity_type_defs,
    federation_service_type_defs,
    get_entity_type_names,
    has_query_type,
    make_entities_resolver,
    purge_schema_directives,
    resolve_entity_type,
)
from .resolver import ResolverMap, default_resolver_map, register_resolvers
from .utils import join_type_defs


def make_schema(
    type_defs: Union[str, List[str]],
    resolvers: ResolverMap = None,
    assume_valid: bool = False,
    assume_valid_sdl: bool = False,
    federation: bool = False,
) -> GraphQLSchema:
    if isinstance(type_defs, list):
        type_defs = join_type_defs(type_defs)
    resolvers = resolvers or default_resolver_map

    if not federation:
        schema = build_schema(type_defs, assume_valid=assume_valid, assume_valid_sdl=assume_valid_sdl)
        register_resolvers(schema, resolvers)
        return schema

    document = parse(type_defs)
    sdl = purge_schema_directives(type_defs)
    entity_type_names = get_entity_type_names(document)

    federated_type_defs = [type_defs, federation_service_type_defs]
    if not has_query_type(document):
        # Subgraphs that only contribute entities still need a root to extend.
        federated_type_defs.insert(0, 'type Query')
    if entity_type_names:
        federated_type_defs.append(federation_entity_type_defs(entity_type_names))

    schema = build_schema(
        join_type_defs(federated_type_defs),
        assume_valid=assume_valid,
        assume_valid_sdl=assume_valid_sdl,
    )
    query_type = cast(GraphQLObjectType, schema.query_type)
    query_type.fields['_service'].resolve = lambda _service, info: {'sdl': sdl}

    if entity_type_names:
        entity_type = cast(GraphQLUnionType, schema.get_type('_Entity'))
        entity_type.resolve_type = resolve_entity_type
        query_type.fields['_entities'].resolve = make_entities_resolver(
            resolvers.references, entity_type_names
        )

    register_resolvers(schema, resolvers)
    return schema


def make_schema_from_file(
    file: str,
    resolvers: ResolverMap = None,
    assume_valid: bool = False,
    assume_valid_sdl: bool = False,
    federation: bool = False,
) -> GraphQLSchema:
    with open(file, 'r') as f:
        return make_schema(f.read(), resolvers, assume_valid, assume_valid_sdl, federation)


def parse_from_file(file: Path) -> str:
    with file.open('r') as f:
        type_defs = f.read()
        parse(type_defs)
        return type_defs


base_type_defs = """
type Query
type Mutation
"""


def make_schema_from_path(
    path: str,
    resolvers: ResolverMap = None,
    assume_valid: bool = False,
    assume_valid_sdl: bool = False,
    federation: bool = False,
) -> GraphQLSchema:
    p = Path(path)
    if p.is_file():
        type_defs = parse_from_file(p)
    elif p.is_dir():
        type_defs = [base_type_defs]
        for file in sorted(p.glob('*.graphql')):
            type_defs.append(parse_from_file(file))
    else:
        raise RuntimeError('path: expect a file or directory!')

    return make_schema(type_defs, resolvers, assume_valid, assume_valid_sdl, federation)
