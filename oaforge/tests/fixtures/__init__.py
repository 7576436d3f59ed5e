"""Test fixtures for oaforge tests.

This module provides sample OpenAPI documents used across the test suite.
"""

import copy

# Minimal OpenAPI 3.0 document for basic testing
MINIMAL_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

_BOOK_ID = {
    'name': 'bookId',
    'in': 'path',
    'required': True,
    'schema': {'type': 'integer'},
}

# A small book store touching most of the generator
BOOKSTORE_SPEC = {
    'openapi': '3.0.0',
    'info': {
        'title': 'Book Store',
        'version': '1.0.0',
        'description': 'A book store for testing',
    },
    'servers': [{'url': 'https://books.example.com/v2', 'description': 'Production'}],
    'paths': {
        '/books': {
            'get': {
                'operationId': 'listBooks',
                'summary': 'List all books',
                'tags': ['books'],
                'parameters': [
                    {'name': 'limit', 'in': 'query', 'schema': {'type': 'integer'}},
                    {
                        'name': 'tags',
                        'in': 'query',
                        'explode': True,
                        'schema': {'type': 'array', 'items': {'type': 'string'}},
                    },
                ],
                'responses': {
                    '200': {
                        'description': 'The books',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Book'},
                                }
                            }
                        },
                    }
                },
            },
            'post': {
                'operationId': 'addBook',
                'summary': 'Add a new book to the store',
                'tags': ['books'],
                'requestBody': {
                    'required': True,
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/Book'}
                        }
                    },
                },
                'responses': {
                    '201': {
                        'description': 'Created',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Book'}
                            }
                        },
                    },
                    'default': {
                        'description': 'Error',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Error'}
                            }
                        },
                    },
                },
            },
        },
        '/books/{bookId}': {
            'get': {
                'operationId': 'getBookById',
                'summary': 'Find book by ID',
                'tags': ['books'],
                'parameters': [_BOOK_ID],
                'responses': {
                    '200': {
                        'description': 'The book',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Book'}
                            }
                        },
                    },
                    '404': {'description': 'Not found'},
                },
            },
            'delete': {
                'tags': ['admin'],
                'parameters': [
                    _BOOK_ID,
                    {'name': 'X-Api-Key', 'in': 'header', 'schema': {'type': 'string'}},
                ],
                'responses': {'204': {'description': 'Deleted'}},
            },
        },
        '/books/{bookId}/cover': {
            'get': {
                'operationId': 'getCover',
                'parameters': [_BOOK_ID],
                'responses': {
                    '200': {
                        'description': 'The cover as SVG',
                        'content': {'text/plain': {'schema': {'type': 'string'}}},
                    }
                },
            }
        },
    },
    'components': {
        'schemas': {
            'Book': {
                'type': 'object',
                'description': 'A book in the store.',
                'required': ['title'],
                'properties': {
                    'id': {'type': 'integer'},
                    'title': {'type': 'string'},
                    'status': {'type': 'string', 'enum': ['available', 'sold']},
                    'author': {'$ref': '#/components/schemas/Author'},
                },
            },
            'Author': {
                'type': 'object',
                'properties': {'name': {'type': 'string'}},
            },
            'Error': {
                'type': 'object',
                'properties': {'message': {'type': 'string'}},
            },
        }
    },
}

# Discriminated unions over component schemas
PETS_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Pets', 'version': '1.0.0'},
    'paths': {
        '/pets': {
            'get': {
                'operationId': 'listPets',
                'responses': {
                    '200': {
                        'description': 'ok',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Pet'},
                                }
                            }
                        },
                    }
                },
            }
        }
    },
    'components': {
        'schemas': {
            'Pet': {
                'oneOf': [
                    {'$ref': '#/components/schemas/Cat'},
                    {'$ref': '#/components/schemas/Dog'},
                ],
                'discriminator': {'propertyName': 'kind', 'mapping': {'dog': 'Dog'}},
            },
            'Cat': {
                'type': 'object',
                'properties': {'meows': {'type': 'boolean'}},
            },
            'Dog': {
                'type': 'object',
                'properties': {'barks': {'type': 'boolean'}},
            },
        }
    },
}

# Query parameter styles, including bracketed deepObject parameters
QUERY_STYLES_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Search', 'version': '1.0.0'},
    'paths': {
        '/search': {
            'get': {
                'operationId': 'search',
                'parameters': [
                    {'name': 'q', 'in': 'query', 'required': True, 'schema': {'type': 'string'}},
                    {
                        'name': 'ids',
                        'in': 'query',
                        'style': 'pipeDelimited',
                        'schema': {'type': 'array', 'items': {'type': 'integer'}},
                    },
                    {
                        'name': 'filter[author]',
                        'in': 'query',
                        'schema': {'type': 'string'},
                    },
                    {
                        'name': 'filter[year]',
                        'in': 'query',
                        'schema': {'type': 'integer'},
                    },
                    {
                        'name': 'redirect',
                        'in': 'query',
                        'allowReserved': True,
                        'schema': {'type': 'string'},
                    },
                ],
                'responses': {
                    '200': {
                        'description': 'ok',
                        'content': {'application/json': {'schema': {'type': 'object'}}},
                    }
                },
            }
        }
    },
}

# Servers with and without variables
SERVERS = [
    {'url': 'http://example.org', 'description': 'Super API'},
    {'url': 'http://example.org/2'},
    {
        'url': 'http://example.{tld}/{path}',
        'variables': {
            'tld': {'enum': ['org', 'com'], 'default': 'org'},
            'path': {'default': ''},
        },
    },
]


def spec_with(base: dict, **changes) -> dict:
    """Return a deep copy of ``base`` with top-level keys replaced."""
    document = copy.deepcopy(base)
    document.update(changes)
    return document
