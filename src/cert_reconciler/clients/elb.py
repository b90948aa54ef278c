"""Classic ELB adapter: load balancer lookups for delete-conflict diagnostics."""

from __future__ import annotations

import botocore.exceptions

from cert_reconciler.clients.base import LoadBalancerApi
from cert_reconciler.errors import ResourceNotFoundError


class ElbLoadBalancerApi(LoadBalancerApi):
    """LoadBalancerApi backed by Elastic Load Balancing (classic)."""

    def __init__(self, elb_client) -> None:
        self._client = elb_client

    def describe_by_name(self, name: str) -> dict:
        try:
            resp = self._client.describe_load_balancers(LoadBalancerNames=[name])
        except botocore.exceptions.ClientError as e:
            if e.response["Error"]["Code"] == "LoadBalancerNotFound":
                raise ResourceNotFoundError("Load balancer", name) from e
            raise
        descriptions = resp.get("LoadBalancerDescriptions", [])
        if not descriptions:
            raise ResourceNotFoundError("Load balancer", name)
        return descriptions[0]
