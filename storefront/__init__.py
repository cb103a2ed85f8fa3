"""Storefront API: REST and GraphQL over a relational store"""

__version__ = "1.0.0"
