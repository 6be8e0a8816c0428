import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .logging import logger
from .mount_options import parse_mount_command, split_list

CACHE_DIR_OPTION = "cache-dir"
DEFAULT_CACHE_VOLUME_NAME_FMT = "jfs-cache-dir-{index}"

HOST_PATH_DIRECTORY = "Directory"
HOST_PATH_DIRECTORY_OR_CREATE = "DirectoryOrCreate"
PROPAGATION_BIDIRECTIONAL = "Bidirectional"


@dataclass(frozen=True)
class Volume:
    name: str
    host_path: str
    host_path_type: str = HOST_PATH_DIRECTORY_OR_CREATE

    def to_dict(self) -> dict:
        return {"name": self.name, "hostPath": {"path": self.host_path, "type": self.host_path_type}}


@dataclass(frozen=True)
class VolumeMount:
    name: str
    mount_path: str
    mount_propagation: Optional[str] = None

    def to_dict(self) -> dict:
        ret = {"name": self.name, "mountPath": self.mount_path}
        if self.mount_propagation:
            ret["mountPropagation"] = self.mount_propagation
        return ret


def get_cache_dirs(mount_command: str) -> List[str]:
    """
    Return cache directories listed by `cache-dir=` option of the mount command, in the given order.
    Return empty list if the option is absent or its value is not a list of absolute paths
    (e.g. 'cache-dir=memory'); juicefs validates its own options at mount time.
    """
    options = parse_mount_command(mount_command).options
    if CACHE_DIR_OPTION not in options:
        return []
    value = options.get(CACHE_DIR_OPTION)
    cache_dirs = split_list(value)
    if not cache_dirs:
        logger.warning(f"Ignoring empty {CACHE_DIR_OPTION} option")
        return []
    if not all(os.path.isabs(d) for d in cache_dirs):
        logger.warning(f"Ignoring {CACHE_DIR_OPTION}={value}: only absolute host paths can be mounted")
        return []
    return cache_dirs


def derive_cache_volumes(
        mount_command: str, name_fmt: str = DEFAULT_CACHE_VOLUME_NAME_FMT
) -> Tuple[List[Volume], List[VolumeMount]]:
    """
    Build one hostPath volume and mount per cache directory of the mount command.
    Host path and mount path are the same, so juicefs inside the mount pod writes straight to the host directory.
    """
    volumes, mounts = [], []
    for index, cache_dir in enumerate(get_cache_dirs(mount_command)):
        name = name_fmt.format(index=index)
        volumes.append(Volume(name=name, host_path=cache_dir))
        mounts.append(VolumeMount(name=name, mount_path=cache_dir))

    if volumes:
        logger.debug(f"Derived cache volumes: {', '.join(v.host_path for v in volumes)}")
    return volumes, mounts
