"""Visa API — visa, travel-authorization and health requirements by nationality and destination."""
