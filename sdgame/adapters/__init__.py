"""
Adapters

Inbound (CLI display) and outbound (persistence) implementations of the
application ports.
"""
