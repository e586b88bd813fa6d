"""
Application Ports

Inbound ports are implemented by application services; outbound ports by
persistence adapters.
"""
