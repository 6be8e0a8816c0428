"""
Tokenizer for the juicefs mount command line and its `-o` option string.

Option string contract:
    * options are separated by ','; each option is either `key` or `key=value`.
      Only the first '=' splits, so values may contain '=' and ':'.
    * empty segments ('a,,b'), leading and trailing separators are skipped.
    * whitespace around keys and values is stripped; segments with an empty key ('=x') are skipped.
    * repeated keys are all kept (see `MountOptions.items`), lookups return the last occurrence
      the same way the last flag wins on a command line.
    * flag options (no '=') have value None.
"""

import shlex
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .logging import logger

OPTIONS_FLAG = "-o"


class MountOptions:

    def __init__(self, items: List[Tuple[str, Optional[str]]] = ()):
        self._items = list(items)

    def __repr__(self):
        return f"MountOptions({self._items!r})"

    def __eq__(self, other):
        if not isinstance(other, MountOptions):
            return NotImplemented
        return self._items == other._items

    def __contains__(self, key):
        return any(k == key for k, _ in self._items)

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def items(self) -> List[Tuple[str, Optional[str]]]:
        return list(self._items)

    def get(self, key: str, default=None) -> Optional[str]:
        for k, v in reversed(self._items):
            if k == key:
                return v
        return default

    def get_all(self, key: str) -> List[Optional[str]]:
        return [v for k, v in self._items if k == key]


def parse_mount_options(text: Optional[str], sep: str = ",") -> MountOptions:
    items = []
    for segment in (text or "").split(sep):
        key, eq, value = segment.partition("=")
        key = key.strip()
        if not key:
            continue
        items.append((key, value.strip() if eq else None))
    return MountOptions(items)


def split_list(value: Optional[str], sep: str = ":") -> List[str]:
    """Split list-valued option (e.g. 'cache-dir=/a:/b'), skipping empty entries."""
    return [p.strip() for p in (value or "").split(sep) if p.strip()]


@dataclass(frozen=True)
class MountCommand:
    """`<binary> <meta-url> <mount-point> [-o <options>]`"""

    binary: str = ""
    meta_url: str = ""
    mount_point: str = ""
    options: MountOptions = field(default_factory=MountOptions)
    extra_args: Tuple[str, ...] = ()


def _tokenize(cmd: str) -> List[str]:
    try:
        return shlex.split(cmd)
    except ValueError as exc:
        logger.debug(f"Falling back to whitespace split for mount command ({exc})")
        return cmd.split()


def parse_mount_command(cmd: Optional[str]) -> MountCommand:
    """
    Split mount command into positionals and options.
    Multiple `-o` flags are joined in order; a trailing `-o` without value is ignored.
    """
    positionals, option_strings = [], []
    tokens = iter(_tokenize(cmd or ""))
    for token in tokens:
        if token == OPTIONS_FLAG:
            if (value := next(tokens, None)) is not None:
                option_strings.append(value)
        else:
            positionals.append(token)

    binary, meta_url, mount_point, *extra = positionals + [""] * max(0, 3 - len(positionals))
    return MountCommand(
        binary=binary,
        meta_url=meta_url,
        mount_point=mount_point,
        options=parse_mount_options(",".join(option_strings)),
        extra_args=tuple(extra),
    )
