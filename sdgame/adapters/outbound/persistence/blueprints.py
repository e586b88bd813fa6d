"""
Component Blueprints

Catalog of components a player can buy, with their setup cost, running cost
and default properties.
"""

from typing import List

from sdgame.domain.models import Component, ComponentType


def list_available_components() -> List[Component]:
    return [
        Component(
            id="server-nano",
            name="Nano Server",
            type=ComponentType.WEB_SERVER,
            setup_cost=50,
            operational_cost=0.05,
            properties={"max_qps": 200, "base_latency": 100},  # cheap but slow
        ),
        Component(
            id="server-standard",
            name="Standard Server",
            type=ComponentType.WEB_SERVER,
            setup_cost=200,
            operational_cost=0.20,
            properties={"max_qps": 1000, "base_latency": 50},
        ),
        Component(
            id="server-high-perf",
            name="High-Perf Server",
            type=ComponentType.WEB_SERVER,
            setup_cost=800,
            operational_cost=0.70,
            properties={"max_qps": 5000, "base_latency": 20},
        ),
        Component(
            id="asg-standard",
            name="Auto-Scaling Group",
            type=ComponentType.AUTO_SCALING_GROUP,
            setup_cost=400,
            operational_cost=0.20,
            properties={
                "max_qps": 1000,
                "auto_scaling": True,
                "max_replicas": 5,
                "scale_up_threshold": 0.7,
            },
        ),
        Component(
            id="lb-simple",
            name="Round-Robin LB",
            type=ComponentType.LOAD_BALANCER,
            setup_cost=150,
            operational_cost=0.10,
            properties={"max_qps": 20000},
        ),
        Component(
            id="cache-redis",
            name="In-Memory Cache",
            type=ComponentType.CACHE,
            setup_cost=300,
            operational_cost=0.15,
            properties={"max_qps": 50000},
        ),
        Component(
            id="db-primary",
            name="Relational Database",
            type=ComponentType.DATABASE,
            setup_cost=500,
            operational_cost=0.40,
            properties={"max_qps": 2000},
        ),
        Component(
            id="db-replicated",
            name="Replicated Database",
            type=ComponentType.DATABASE,
            setup_cost=1200,
            operational_cost=0.90,
            properties={"max_qps": 2000, "replication_mode": "master-slave", "slave_count": 2},
        ),
        Component(
            id="nosql-kv",
            name="Key-Value Store",
            type=ComponentType.NOSQL,
            setup_cost=600,
            operational_cost=0.35,
            properties={"max_qps": 10000},
        ),
        Component(
            id="mq-standard",
            name="Message Queue",
            type=ComponentType.MESSAGE_QUEUE,
            setup_cost=250,
            operational_cost=0.10,
            properties={"max_qps": 10000, "delivery_mode": "push"},
        ),
        Component(
            id="cdn-edge",
            name="CDN Edge",
            type=ComponentType.CDN,
            setup_cost=400,
            operational_cost=0.25,
            properties={"max_qps": 100000},
        ),
        Component(
            id="waf-basic",
            name="Web Application Firewall",
            type=ComponentType.WAF,
            setup_cost=350,
            operational_cost=0.15,
            properties={"max_qps": 30000},
        ),
        Component(
            id="gateway-api",
            name="API Gateway",
            type=ComponentType.API_GATEWAY,
            setup_cost=300,
            operational_cost=0.12,
            properties={"max_qps": 20000},
        ),
    ]
