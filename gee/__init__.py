"""Small building blocks: web framework, cache, ORM, RPC codec and discovery, algorithms."""

__version__ = "0.1.0"