import logging
from collections import defaultdict
from enum import Enum
from functools import wraps
from inspect import iscoroutinefunction, isfunction
from typing import Any, Callable, Dict, Mapping, Union

from graphql import (
    GraphQLFieldResolver,
    GraphQLResolveInfo,
    GraphQLSchema,
    assert_interface_type,
    assert_object_type,
    is_interface_type,
    is_object_type,
)

from .utils import execute_async_function, recursive_to_snake_case, to_camel_case, to_snake_case

logger = logging.getLogger(__name__)

ReferenceResolver = Callable[[Any, GraphQLResolveInfo, dict], Any]
FieldResolverMap = Dict[str, Dict[str, GraphQLFieldResolver]]
ReferenceResolverMap = Dict[str, ReferenceResolver]


def _log_exceptions(func: Callable, label: str, log_exc: bool = True) -> Callable:
    @wraps(func)
    def sync_resolver(*args, **kwargs):
        if not log_exc:
            return func(*args, **kwargs)

        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception('Resolver %s failed', label)
            raise

    @wraps(func)
    async def async_resolver(*args, **kwargs):
        if not log_exc:
            return await execute_async_function(func, *args, **kwargs)

        try:
            return await execute_async_function(func, *args, **kwargs)
        except Exception:
            logger.exception('Resolver %s failed', label)
            raise

    if iscoroutinefunction(func):
        return async_resolver
    return sync_resolver


class ResolverMap:
    """Resolvers collected by decorators, attached to a schema by `register_resolvers`.

    >>> resolvers = ResolverMap()
    >>> @resolvers.query('me')
    ... def get_me(parent, info):
    ...     return {'id': '1'}
    """

    def __init__(self) -> None:
        self.fields: FieldResolverMap = defaultdict(dict)
        self.references: ReferenceResolverMap = {}

    def field_resolver(
        self,
        type_name: str,
        func_or_field: Union[GraphQLFieldResolver, str] = None,
        log_exc: bool = True,
        snake_argument: bool = True,
    ):
        def wrap(func: GraphQLFieldResolver):
            if isinstance(func_or_field, str):
                name = to_camel_case(func_or_field)
            else:
                name = to_camel_case(func.__name__)

            if snake_argument:
                target = _snake_arguments(func)
            else:
                target = func

            resolver = _log_exceptions(target, f'{type_name}.{name}', log_exc)
            self.fields[type_name][name] = resolver
            return resolver

        if isfunction(func_or_field):
            return wrap(func_or_field)

        return wrap

    def query(self, func_or_field: Union[GraphQLFieldResolver, str] = None, **kwargs):
        return self.field_resolver('Query', func_or_field, **kwargs)

    def mutate(self, func_or_field: Union[GraphQLFieldResolver, str] = None, **kwargs):
        return self.field_resolver('Mutation', func_or_field, **kwargs)

    def reference_resolver(self, type_name: str):
        def wrap(func: ReferenceResolver):
            resolver = _log_exceptions(func, f'{type_name}.__resolve_reference__')
            self.references[type_name] = resolver
            return resolver

        return wrap


def _snake_arguments(func: Callable) -> Callable:
    if iscoroutinefunction(func):

        @wraps(func)
        async def async_wrap(*args, **kwargs):
            return await func(*args, **recursive_to_snake_case(kwargs))

        return async_wrap

    @wraps(func)
    def wrap(*args, **kwargs):
        return func(*args, **recursive_to_snake_case(kwargs))

    return wrap


default_resolver_map = ResolverMap()

field_resolver = default_resolver_map.field_resolver
query = default_resolver_map.query
mutate = default_resolver_map.mutate
reference_resolver = default_resolver_map.reference_resolver


def register_field_resolvers(schema: GraphQLSchema, resolver_map: ResolverMap):
    for type_name, field_resolvers in resolver_map.fields.items():
        type_ = schema.get_type(type_name)
        if is_object_type(type_):
            type_ = assert_object_type(type_)
        elif is_interface_type(type_):
            type_ = assert_interface_type(type_)
        else:
            continue

        for name, resolver in field_resolvers.items():
            field = type_.fields.get(name)
            if not field:
                continue
            field.resolve = resolver


def register_resolvers(schema: GraphQLSchema, resolver_map: ResolverMap = None):
    register_field_resolvers(schema, resolver_map or default_resolver_map)


def get_field_value(source, field_name):
    return (
        source.get(field_name) if isinstance(source, Mapping) else getattr(source, field_name, None)
    )


def default_field_resolver(source, info, **args):
    """Default field resolver.

    If a resolve function is not given, then a default resolve behavior is used which
    takes the property of the source object of the same name as the field and returns
    it as the result, or if it's a function, returns the result of calling that function
    while passing along args and context.

    For dictionaries, the field names are used as keys, for all other objects they are
    used as attribute names.
    """
    value = get_field_value(source, to_snake_case(info.field_name))
    if value is None:
        value = get_field_value(source, info.field_name)

    if callable(value):
        return value(info, **args)
    if isinstance(value, Enum):
        return value.value
    return value
