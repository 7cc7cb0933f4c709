"""
Postboard: short text posts over a hosted identity provider and GraphQL post service
"""
__version__ = "0.1.0"
