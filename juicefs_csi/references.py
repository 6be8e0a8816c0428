"""
Reference counting of mount pods.

Every consumer (application pod target path) that depends on a mount pod is recorded as one annotation
on the mount pod. The key is the reference prefix followed by a digest of the consumer identity,
the value is opaque to this module (usually the target path or a timestamp).
The attach path adds a reference, the detach path removes it, and the mount pod may be deleted
once no reference is left.
"""

import hashlib
from typing import Collection, Iterator, Mapping, Optional

DEFAULT_REFERENCE_PREFIX = "juicefs-"

# Kubernetes limits the name part of an annotation key to 63 characters
MAX_KEY_LENGTH = 63
# shortest digest that still tells consumers apart
MIN_DIGEST_LENGTH = 16


def validate_reference_prefix(prefix: str) -> str:
    if len(prefix) > MAX_KEY_LENGTH - MIN_DIGEST_LENGTH:
        raise ValueError(
            f"reference prefix {prefix!r} is too long ({len(prefix)} chars,"
            f" at most {MAX_KEY_LENGTH - MIN_DIGEST_LENGTH} allowed)"
        )
    return prefix


def get_reference_key(target: str, prefix: str = DEFAULT_REFERENCE_PREFIX) -> str:
    """Only the digest is truncated, so the key always keeps the full prefix."""
    validate_reference_prefix(prefix)
    digest = hashlib.sha256(target.encode()).hexdigest()
    return prefix + digest[:MAX_KEY_LENGTH - len(prefix)]


def iter_references(
        annotations: Optional[Mapping[str, str]],
        prefix: str = DEFAULT_REFERENCE_PREFIX,
        excluded: Collection[str] = (),
) -> Iterator[str]:
    for key in annotations or ():
        if key.startswith(prefix) and key not in excluded:
            yield key


def has_reference(
        annotations: Optional[Mapping[str, str]],
        prefix: str = DEFAULT_REFERENCE_PREFIX,
        excluded: Collection[str] = (),
) -> bool:
    """Check if any consumer still references the mount pod. `excluded` lists bookkeeping keys under `prefix`."""
    return next(iter_references(annotations, prefix, excluded), None) is not None


class ReferenceSet:
    """
    Set of consumer references backed by a copy of the mount pod annotations.
    The caller persists `annotations` with its own (optimistically concurrent) update call.
    """

    def __init__(
            self,
            annotations: Optional[Mapping[str, str]] = None,
            prefix: str = DEFAULT_REFERENCE_PREFIX,
            excluded: Collection[str] = (),
    ):
        self.annotations = dict(annotations or {})
        self.prefix = validate_reference_prefix(prefix)
        self.excluded = frozenset(excluded)

    def __repr__(self):
        return f"ReferenceSet({len(self)} references)"

    def __len__(self):
        return sum(1 for _ in self.keys())

    def __contains__(self, target):
        return self.key(target) in self.annotations

    def key(self, target: str) -> str:
        return get_reference_key(target, self.prefix)

    def keys(self) -> Iterator[str]:
        return iter_references(self.annotations, self.prefix, self.excluded)

    def add(self, target: str, value: Optional[str] = None) -> str:
        key = self.key(target)
        self.annotations[key] = target if value is None else value
        return key

    def remove(self, target: str) -> bool:
        """Return False if `target` wasn't referenced."""
        return self.annotations.pop(self.key(target), None) is not None

    def has(self) -> bool:
        return has_reference(self.annotations, self.prefix, self.excluded)
