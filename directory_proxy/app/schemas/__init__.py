"""
Pydantic schema definitions.

``upstream`` models the Shopify GraphQL payloads the proxy consumes;
``listing`` and ``category`` model the JSON bodies it serves.  Keeping
them apart decouples the public response shape from the upstream one.
"""
