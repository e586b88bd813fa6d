"""
System Design Game HTTP API
"""
