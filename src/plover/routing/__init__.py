"""Routing — route table, reference resolver, transitions and query params.

Routes are registered during setup and compiled into an immutable
lookup structure when the router is built.
"""
