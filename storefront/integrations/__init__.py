"""
Integrations with external catalog sources.
"""
