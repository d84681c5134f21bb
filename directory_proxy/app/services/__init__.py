"""
Service layer.

Each service encapsulates one stage of the directory pipeline: talking
to Shopify, resolving media references, building the category group
index, aggregating listings and answering listing queries.  Services
are plain objects wired together once per application in
``core.dependencies`` so tests can swap any of them.
"""
