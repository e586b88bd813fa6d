"""
Application Layer

Use-case services orchestrating the domain engine and repositories.
"""
