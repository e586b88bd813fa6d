"""
System Design Game

Evaluates player-authored infrastructure topologies against traffic
scenarios: how much traffic a design serves, where it fails, and how it
scores on capacity, latency, reliability, security, cost and consistency.
"""

__version__ = "0.1.0"
