"""
Inbound Adapters
"""
