"""
Storefront engine: bilingual catalog resolution and persisted commerce state.
"""

__version__ = "1.0.0"
