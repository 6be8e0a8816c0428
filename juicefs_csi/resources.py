from dataclasses import dataclass, field
from typing import Dict, Optional

from .exceptions import InvalidQuantity, QuantityParseError
from .quantity import Quantity, parse_quantity

CPU = "cpu"
MEMORY = "memory"


@dataclass(frozen=True)
class ResourceRequirement:
    """Limits and requests of the mount pod container. Unset resources are absent, never defaulted."""

    limits: Dict[str, Quantity] = field(default_factory=dict)
    requests: Dict[str, Quantity] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Render requirement the way it appears in a container spec."""
        ret = {}
        if self.limits:
            ret["limits"] = {name: str(q) for name, q in self.limits.items()}
        if self.requests:
            ret["requests"] = {name: str(q) for name, q in self.requests.items()}
        return ret

    @classmethod
    def from_config(cls, conf) -> "ResourceRequirement":
        return build_resource_requirement(
            conf.mount_pod_cpu_limit,
            conf.mount_pod_mem_limit,
            conf.mount_pod_cpu_request,
            conf.mount_pod_mem_request,
        )


def _parse_field(field_name: str, value: Optional[str]) -> Optional[Quantity]:
    if not value:
        return None
    try:
        return parse_quantity(value)
    except QuantityParseError:
        raise InvalidQuantity(field=field_name, value=value) from None


def build_resource_requirement(
        cpu_limit: Optional[str],
        mem_limit: Optional[str],
        cpu_request: Optional[str],
        mem_request: Optional[str],
) -> ResourceRequirement:
    """
    Build mount pod resource requirement from quantity strings.
    Empty strings are omitted from the result; when all four are empty both maps are present and empty.
    Raise `InvalidQuantity` naming the first invalid field.
    """
    limits, requests = {}, {}
    for target, name, field_name, value in (
            (limits, CPU, "cpu_limit", cpu_limit),
            (limits, MEMORY, "mem_limit", mem_limit),
            (requests, CPU, "cpu_request", cpu_request),
            (requests, MEMORY, "mem_request", mem_request),
    ):
        if (quantity := _parse_field(field_name, value)) is not None:
            target[name] = quantity
    return ResourceRequirement(limits=limits, requests=requests)
