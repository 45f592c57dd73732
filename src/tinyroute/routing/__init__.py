"""Routing — ordered pattern rules with convention-based fallback.

Routes are registered during setup; each dispatch matches the request
path against them in order and falls back to deriving a controller
and method from the path when none matches.
"""
