"""Test fixtures for zodgen tests.

Sample OpenAPI documents and component-schema sets used across the suite.
"""


def ref(name: str) -> dict:
    return {'$ref': f'#/components/schemas/{name}'}


def json_body(schema: dict) -> dict:
    return {'content': {'application/json': {'schema': schema}}}


def json_response(schema: dict) -> dict:
    return {'description': 'Successful response', **json_body(schema)}


# Minimal OpenAPI 3.0 document without schemas
MINIMAL_OPENAPI_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

USER_SCHEMA = {
    'type': 'object',
    'required': ['id', 'email', 'tier'],
    'properties': {
        'id': {'type': 'string'},
        'email': {'type': 'string', 'format': 'email'},
        'tier': {'type': 'string', 'enum': ['free', 'pro', 'enterprise']},
    },
}

CATEGORY_SCHEMA = {
    'type': 'object',
    'required': ['name'],
    'properties': {
        'name': {'type': 'string'},
        'children': {'type': 'array', 'items': ref('Category')},
    },
}

REPORT_SCHEMA = {
    'type': 'object',
    'required': [],
    'properties': {'tags': {'type': 'array', 'items': {'type': 'string'}}},
}

ADDRESS_SCHEMA = {
    'type': 'object',
    'properties': {
        'street': {'type': 'string', 'description': 'Street and number'},
        'city': {'type': 'string'},
    },
}

# Users / Orders / Catalog / Reports API covering shared, recursive and
# mutually recursive schemas.
SHOP_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Shop API', 'version': '1.0.0'},
    'paths': {
        '/users': {
            'get': {
                'tags': ['Users'],
                'operationId': 'listUsers',
                'summary': 'List users',
                'parameters': [
                    {
                        'name': 'tier',
                        'in': 'query',
                        'required': False,
                        'schema': {'type': 'string', 'enum': ['free', 'pro', 'enterprise']},
                    },
                    {
                        'name': 'limit',
                        'in': 'query',
                        'required': True,
                        'description': 'Page size',
                        'schema': {'type': 'integer', 'minimum': 1, 'maximum': 100},
                    },
                    {
                        'name': 'X-Request-Id',
                        'in': 'header',
                        'required': True,
                        'schema': {'type': 'string'},
                    },
                    {
                        'name': 'Authorization',
                        'in': 'header',
                        'schema': {'type': 'string'},
                    },
                ],
                'responses': {
                    '200': json_response({'type': 'array', 'items': ref('User')})
                },
            },
            'post': {
                'tags': ['Users'],
                'operationId': 'createUser',
                'summary': 'Create a user',
                'requestBody': json_body(ref('User')),
                'responses': {'201': json_response(ref('User'))},
            },
        },
        '/orders': {
            'get': {
                'tags': ['Orders'],
                'operationId': 'listOrders',
                'summary': 'List orders',
                'responses': {
                    '200': json_response({'type': 'array', 'items': ref('Order')})
                },
            }
        },
        '/categories': {
            'get': {
                'tags': ['Catalog'],
                'operationId': 'listCategories',
                'summary': 'List categories',
                'responses': {'200': json_response(ref('Category'))},
            }
        },
        '/reports/{id}': {
            'get': {
                'tags': ['Reports'],
                'operationId': 'getReport',
                'summary': 'Get a report',
                'parameters': [
                    {'name': 'id', 'in': 'path', 'required': True, 'schema': {'type': 'string'}}
                ],
                'responses': {'200': json_response(ref('Report'))},
            }
        },
        '/health': {
            'get': {
                'summary': 'Health check',
                'responses': {'200': json_response(ref('Health'))},
            }
        },
    },
    'components': {
        'schemas': {
            'User': {
                **USER_SCHEMA,
                'properties': {**USER_SCHEMA['properties'], 'address': ref('Address')},
            },
            'Address': ADDRESS_SCHEMA,
            'Order': {
                'type': 'object',
                'required': ['id', 'lines'],
                'properties': {
                    'id': {'type': 'string', 'format': 'uuid'},
                    'shippingAddress': ref('Address'),
                    'lines': {'type': 'array', 'items': ref('OrderLine')},
                    'status': {'type': 'string', 'enum': ['open', 'shipped']},
                },
            },
            'OrderLine': {
                'type': 'object',
                'required': ['product', 'quantity'],
                'properties': {
                    'product': ref('Product'),
                    'quantity': {'type': 'integer', 'minimum': 1},
                },
            },
            'Product': {
                'type': 'object',
                'required': ['sku'],
                'properties': {
                    'sku': {'type': 'string', 'minLength': 3, 'maxLength': 12},
                    'price': {'type': 'number', 'minimum': 0},
                },
            },
            'Category': CATEGORY_SCHEMA,
            'Report': REPORT_SCHEMA,
            'Health': {
                'type': 'object',
                'properties': {'status': {'type': 'string', 'enum': ['up', 'down']}},
            },
            'NodeA': {'type': 'object', 'properties': {'b': ref('NodeB')}},
            'NodeB': {'type': 'object', 'properties': {'a': ref('NodeA')}},
        }
    },
}

# Component schemas with a dangling reference
DANGLING_SCHEMAS = {
    'Invoice': {
        'type': 'object',
        'properties': {'customer': ref('Customer')},
    },
    'Receipt': {
        'type': 'object',
        'properties': {'invoice': ref('Invoice')},
    },
    'Note': {'type': 'object', 'properties': {'text': {'type': 'string'}}},
}
