import json
import logging
import typing

from graphql import GraphQLSchema, graphql
from starlette import status
from starlette.applications import Starlette
from starlette.background import BackgroundTasks
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import BaseRoute, Route
from starlette.types import Receive, Scope, Send

from .resolver import default_field_resolver

logger = logging.getLogger(__name__)


class GraphQL(Starlette):
    def __init__(
        self,
        schema: GraphQLSchema,
        *,
        context: typing.Mapping[str, typing.Any] = None,
        path: str = '/graphql',
        debug: bool = False,
        routes: typing.List[BaseRoute] = None,
    ):
        routes = list(routes or [])
        endpoint = GraphQLApp(schema, context=context)
        routes.append(Route(path, endpoint))
        if path != '/':
            routes.append(Route('/', endpoint))
        super().__init__(debug=debug, routes=routes)


class GraphQLApp:
    def __init__(self, schema: GraphQLSchema, context: typing.Mapping[str, typing.Any] = None) -> None:
        self.schema = schema
        self.context = dict(context or {})

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive=receive)
        response = await self.handle_graphql(request)
        await response(scope, receive, send)

    async def get_data(self, request: Request) -> typing.Union[typing.Mapping[str, typing.Any], Response]:
        if request.method in ('GET', 'HEAD'):
            return request.query_params

        if request.method != 'POST':
            return PlainTextResponse('Method Not Allowed', status_code=status.HTTP_405_METHOD_NOT_ALLOWED)

        content_type = request.headers.get('Content-Type', '')
        if 'application/json' in content_type:
            try:
                data = await request.json()
            except ValueError:
                return PlainTextResponse('Invalid JSON body', status_code=status.HTTP_400_BAD_REQUEST)
            if not isinstance(data, dict):
                return PlainTextResponse(
                    'Request body must be a JSON object', status_code=status.HTTP_400_BAD_REQUEST
                )
            return data
        if 'application/graphql' in content_type:
            body = await request.body()
            try:
                return {'query': body.decode()}
            except UnicodeDecodeError:
                return PlainTextResponse('Invalid UTF-8 body', status_code=status.HTTP_400_BAD_REQUEST)
        if 'query' in request.query_params:
            return request.query_params

        return PlainTextResponse(
            'Unsupported Media Type', status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        )

    async def handle_graphql(self, request: Request) -> Response:
        data = await self.get_data(request)
        if isinstance(data, Response):
            return data

        try:
            query = data['query']
            variables = data.get('variables')
            operation_name = data.get('operationName')
        except KeyError:
            return PlainTextResponse(
                'No GraphQL query found in the request', status_code=status.HTTP_400_BAD_REQUEST
            )
        if not isinstance(query, str):
            return PlainTextResponse('Query must be a string', status_code=status.HTTP_400_BAD_REQUEST)

        if isinstance(variables, str):
            try:
                variables = json.loads(variables)
            except ValueError:
                return PlainTextResponse(
                    'Variables are invalid JSON', status_code=status.HTTP_400_BAD_REQUEST
                )
        if variables is not None and not isinstance(variables, dict):
            return PlainTextResponse(
                'Variables must be a JSON object', status_code=status.HTTP_400_BAD_REQUEST
            )

        background = BackgroundTasks()
        context = {'request': request, 'background': background, **self.context}

        result = await graphql(
            self.schema,
            query,
            variable_values=variables,
            operation_name=operation_name,
            context_value=context,
            field_resolver=default_field_resolver,
        )
        response_data: typing.Dict[str, typing.Any] = {'data': result.data}
        if result.errors:
            logger.debug('GraphQL request finished with %d error(s)', len(result.errors))
            response_data['errors'] = [error.formatted for error in result.errors]
        status_code = status.HTTP_400_BAD_REQUEST if result.data is None else status.HTTP_200_OK

        return JSONResponse(response_data, status_code=status_code, background=background)
