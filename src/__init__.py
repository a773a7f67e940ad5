"""
Vebra Client - Core Package

This package contains the client for the Vebra property-listing API,
including branch and property records built from the API's XML payloads.
"""

__version__ = "0.1.0"
