"""
Storefront – product listing with link-preview enrichment.

Shared utilities (config, logging, errors) live at the package root; domain
records, HTTP clients, the enrichment service and the web app live in
subpackages.
"""

__all__ = [
    "config",
    "errors",
    "logging",
]
