"""
Application package initializer.

The directory proxy reads listing and category metaobjects from a
Shopify store, resolves media references into CDN URLs and serves
filtered, sorted and paginated listings.  The code is split into
``core`` (configuration, logging, persistence), ``services`` (the
aggregation and query pipeline), ``schemas`` (pydantic models) and
versioned routers under ``api``.
"""
