"""Tool Gateway.

Tool and investigation definitions plus the clients that run a query
against a tool and hand back its raw response body.
"""
