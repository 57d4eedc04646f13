"""A minimal WSGI web framework with routing, groups, middleware and templates."""