"""
Catalog package for the book catalogue API.

This package holds the catalogue's domain logic (ISBN generation,
validation rules, search and the ``CatalogueService`` that ties them to
a repository) together with the schemas and routes that expose it over
HTTP. The service has no knowledge of HTTP; the router and exception
handlers translate between the two.
"""

from .router import router as catalog_router  # noqa: F401
