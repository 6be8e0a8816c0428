from typing import List, Mapping, Optional, Tuple

from .cache_volumes import (
    Volume,
    VolumeMount,
    derive_cache_volumes,
    CACHE_DIR_OPTION,
    HOST_PATH_DIRECTORY,
    PROPAGATION_BIDIRECTIONAL,
)
from .logging import logger
from .mount_options import parse_mount_command
from .references import has_reference
from .resources import ResourceRequirement

APP_LABEL = "app.kubernetes.io/name"
APP_LABEL_VALUE = "juicefs-mount"
CONTAINER_NAME = "jfs-mount"
MOUNT_DIR_VOLUME = "jfs-dir"
ROOT_DIR_VOLUME = "jfs-root-dir"
DEFAULT_CACHE_VOLUME = "jfs-default-cache"


def base_volumes(conf) -> Tuple[List[Volume], List[VolumeMount]]:
    """Volumes every mount pod gets: mount point directory and juicefs root config directory."""
    volumes = [
        Volume(name=MOUNT_DIR_VOLUME, host_path=str(conf.mount_point_path), host_path_type=HOST_PATH_DIRECTORY),
        Volume(name=ROOT_DIR_VOLUME, host_path=str(conf.jfs_config_path), host_path_type=HOST_PATH_DIRECTORY),
    ]
    mounts = [
        VolumeMount(
            name=MOUNT_DIR_VOLUME, mount_path=str(conf.pod_mount_base), mount_propagation=PROPAGATION_BIDIRECTIONAL
        ),
        VolumeMount(
            name=ROOT_DIR_VOLUME, mount_path=str(conf.root_config_mount_path),
            mount_propagation=PROPAGATION_BIDIRECTIONAL,
        ),
    ]
    return volumes, mounts


def build_mount_pod(
        conf,
        name: str,
        cmd: str,
        labels: Optional[Mapping[str, str]] = None,
        annotations: Optional[Mapping[str, str]] = None,
        resources: Optional[ResourceRequirement] = None,
) -> dict:
    """
    Build mount pod manifest running `cmd` on the configured node.
    Cache volumes derived from `cmd` are appended after the base volumes; without a `cache-dir` option
    the configured default cache directory is mounted instead.
    Resources default to the configured mount pod resources (raising `InvalidQuantity` if misconfigured).
    """
    if resources is None:
        resources = conf.mount_pod_resources

    mount_command = parse_mount_command(cmd)
    volumes, mounts = base_volumes(conf)
    cache_volumes, cache_mounts = derive_cache_volumes(cmd, name_fmt=conf.cache_volume_name_fmt)
    if CACHE_DIR_OPTION not in mount_command.options:
        # juicefs falls back to its default cache directory
        default_cache_dir = str(conf.default_cache_dir)
        cache_volumes = [Volume(name=DEFAULT_CACHE_VOLUME, host_path=default_cache_dir)]
        cache_mounts = [VolumeMount(name=DEFAULT_CACHE_VOLUME, mount_path=default_cache_dir)]
    volumes += cache_volumes
    mounts += cache_mounts

    container = {
        "name": CONTAINER_NAME,
        "image": conf.mount_image,
        "command": ["sh", "-c", cmd],
        "securityContext": {"privileged": True},
        "resources": resources.to_dict(),
        "volumeMounts": [m.to_dict() for m in mounts],
    }
    if mount_point := mount_command.mount_point:
        container["lifecycle"] = {"preStop": {"exec": {"command": ["sh", "-c", f"umount {mount_point}"]}}}

    logger.debug(f"Built mount pod {name} with {len(cache_volumes)} cache volume(s)")
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": name,
            "namespace": conf.namespace,
            "labels": {APP_LABEL: APP_LABEL_VALUE, **(labels or {})},
            "annotations": dict(annotations or {}),
        },
        "spec": {
            "nodeName": conf.node_name,
            "restartPolicy": "Always",
            "containers": [container],
            "volumes": [v.to_dict() for v in volumes],
        },
    }


def mount_pod_deletable(annotations: Optional[Mapping[str, str]], conf) -> bool:
    """Mount pod is no longer needed when no consumer references it. Grace period is up to the caller."""
    return not has_reference(annotations, conf.reference_prefix, conf.bookkeeping_annotations)
