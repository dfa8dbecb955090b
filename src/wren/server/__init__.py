"""ASGI adapter — request/response plumbing around the router.

Converts ASGI scopes to Requests, handler return values to Responses,
and Responses back to ASGI messages.
"""
