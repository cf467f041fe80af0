"""User record store adapters.

The cooldown gate talks to an abstract store so the service can start with
the in-memory backend and move to a file or a shared database later without
changing the gate or the HTTP layer.
"""
