"""
Top‑level package for the Directory Proxy.

This file makes ``directory_proxy`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``directory_proxy.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
