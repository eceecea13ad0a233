"""Lenient pydantic model of the OpenAPI 3.x document parts zodgen reads.

Only paths, operations, parameters, request bodies, responses and the
``components`` section are modelled. Schema objects are kept as raw
dictionaries and handed to :class:`zodgen.codegen.schema.SchemaParser`.
Unknown keys are accepted everywhere so 3.0 and 3.1 documents both validate.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')


class Reference(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: str = Field(..., alias='$ref')

    @property
    def component_name(self) -> str:
        return self.ref.rsplit('/', 1)[-1]


class MediaType(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    schema_: Optional[Dict[str, Any]] = Field(None, alias='schema')
    example: Optional[Any] = None


class Parameter(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    name: str
    in_: str = Field(..., alias='in')
    description: Optional[str] = None
    required: Optional[bool] = False
    schema_: Optional[Dict[str, Any]] = Field(None, alias='schema')


class RequestBody(BaseModel):
    model_config = ConfigDict(extra='allow')

    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)
    required: Optional[bool] = False


class Response(BaseModel):
    model_config = ConfigDict(extra='allow')

    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)


class Operation(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    operationId: Optional[str] = None
    parameters: Optional[List[Union[Reference, Parameter]]] = None
    requestBody: Optional[Union[Reference, RequestBody]] = None
    responses: Dict[str, Union[Reference, Response]] = Field(default_factory=dict)


class PathItem(BaseModel):
    model_config = ConfigDict(extra='allow')

    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    parameters: Optional[List[Union[Reference, Parameter]]] = None

    def operations(self) -> Iterator[Tuple[str, Operation]]:
        """Yield ``(method, operation)`` pairs in canonical method order."""
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


class Components(BaseModel):
    model_config = ConfigDict(extra='allow')

    schemas: Dict[str, Any] = Field(default_factory=dict)
    parameters: Dict[str, Parameter] = Field(default_factory=dict)
    requestBodies: Dict[str, RequestBody] = Field(default_factory=dict)
    responses: Dict[str, Response] = Field(default_factory=dict)


class OpenAPIDocument(BaseModel):
    model_config = ConfigDict(extra='allow')

    openapi: str = '3.0.0'
    info: Dict[str, Any] = Field(default_factory=dict)
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)

    def resolve_parameter(self, parameter: Union[Reference, Parameter]) -> Parameter | None:
        if isinstance(parameter, Reference):
            return self.components.parameters.get(parameter.component_name)
        return parameter

    def resolve_request_body(
        self, body: Union[Reference, RequestBody, None]
    ) -> RequestBody | None:
        if isinstance(body, Reference):
            return self.components.requestBodies.get(body.component_name)
        return body

    def resolve_response(self, response: Union[Reference, Response]) -> Response | None:
        if isinstance(response, Reference):
            return self.components.responses.get(response.component_name)
        return response
