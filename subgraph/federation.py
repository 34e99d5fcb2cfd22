from inspect import isawaitable
from typing import Any, Dict, List, Mapping, Optional

from graphql import (
    REMOVE,
    DirectiveDefinitionNode,
    DirectiveNode,
    DocumentNode,
    GraphQLError,
    GraphQLResolveInfo,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    Visitor,
    parse,
    print_ast,
    visit,
)

from .resolver import ReferenceResolverMap

federation_directives = ['external', 'requires', 'provides', 'key', 'extends']
# Directives a gateway understands in the `_service { sdl }` document.
allowed_directives = ['skip', 'include', 'deprecated', 'specifiedBy', *federation_directives]

federation_service_type_defs = """
scalar _Any

scalar _FieldSet

directive @external on FIELD_DEFINITION

directive @requires(fields: _FieldSet!) on FIELD_DEFINITION

directive @provides(fields: _FieldSet!) on FIELD_DEFINITION

directive @key(fields: _FieldSet!) repeatable on OBJECT | INTERFACE

directive @extends on OBJECT | INTERFACE

type _Service {
  sdl: String
}

extend type Query {
  _service: _Service!
}
"""

TYPENAME = '__typename'


def federation_entity_type_defs(entity_type_names: List[str]) -> str:
    return f"""
union _Entity = {' | '.join(entity_type_names)}

extend type Query {{
  _entities(representations: [_Any!]!): [_Entity]!
}}
"""


def has_query_type(document: DocumentNode) -> bool:
    return any(
        isinstance(definition, ObjectTypeDefinitionNode) and definition.name.value == 'Query'
        for definition in document.definitions
    )


def get_entity_type_names(document: DocumentNode) -> List[str]:
    names: List[str] = []
    for definition in document.definitions:
        if not isinstance(definition, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
            continue
        directives = definition.directives or []
        if not any(directive.name.value == 'key' for directive in directives):
            continue
        if definition.name.value not in names:
            names.append(definition.name.value)
    return names


class PurgeDirectivesVisitor(Visitor):
    def enter_directive_definition(self, node: DirectiveDefinitionNode, *_args):
        if node.name.value not in allowed_directives:
            return REMOVE
        return None

    def enter_directive(self, node: DirectiveNode, *_args):
        if node.name.value not in allowed_directives:
            return REMOVE
        return None


def purge_schema_directives(type_defs: str) -> str:
    """Remove custom schema directives (to avoid apollo-gateway crashes)."""
    document = visit(parse(type_defs), PurgeDirectivesVisitor())
    return print_ast(document)


def add_typename(value: Any, typename: str) -> Any:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return {**value, TYPENAME: typename}
    try:
        setattr(value, TYPENAME, typename)
    except AttributeError:
        raise GraphQLError(
            f'Reference resolver for {typename} must return a mapping or an object that accepts attributes, '
            f'got {type(value).__name__}.'
        ) from None
    return value


async def add_typename_async(value: Any, typename: str) -> Any:
    return add_typename(await value, typename)


def resolve_reference(
    reference_resolvers: ReferenceResolverMap,
    entity_type_names: List[str],
    info: GraphQLResolveInfo,
    representation: Dict[str, Any],
) -> Any:
    typename = representation.get(TYPENAME) if isinstance(representation, Mapping) else None
    if typename not in entity_type_names:
        raise GraphQLError(f'The `_entities` representation has an unknown {TYPENAME}: {typename!r}.')

    resolver = reference_resolvers.get(typename)
    if resolver is None:
        result = representation
    else:
        result = resolver(None, info, representation)

    if isawaitable(result):
        return add_typename_async(result, typename)
    return add_typename(result, typename)


def make_entities_resolver(reference_resolvers: ReferenceResolverMap, entity_type_names: List[str]):
    def resolve_entities(_parent, info: GraphQLResolveInfo, representations: List[Dict[str, Any]]):
        return [
            resolve_reference(reference_resolvers, entity_type_names, info, representation)
            for representation in representations
        ]

    return resolve_entities


def resolve_entity_type(value: Any, *_args) -> Optional[str]:
    if isinstance(value, Mapping):
        return value.get(TYPENAME)
    return getattr(value, TYPENAME, None)
