"""Routing — pattern compilation, routes, and the ordered dispatcher.

Patterns compile once per route at registration. Matching walks routes
in registration order; the first match wins.
"""
