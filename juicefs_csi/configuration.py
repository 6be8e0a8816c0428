import socket

from plumbum import local
from plumbum.typed_env import TypedEnv

from . import __version__
from .cache_volumes import DEFAULT_CACHE_VOLUME_NAME_FMT
from .references import DEFAULT_REFERENCE_PREFIX


class Config(TypedEnv):
    class Path(TypedEnv.Str):
        convert = staticmethod(local.path)

    plugin_version = __version__
    plugin_name = TypedEnv.Str("X_CSI_PLUGIN_NAME", default="csi.juicefs.com")
    log_level = TypedEnv.Str("X_CSI_LOG_LEVEL", default="info")
    node_name = TypedEnv.Str("NODE_NAME", default=socket.getfqdn())

    namespace = TypedEnv.Str("JUICEFS_MOUNT_NAMESPACE", default="kube-system")
    mount_image = TypedEnv.Str("JUICEFS_MOUNT_IMAGE", default="juicedata/juicefs-csi-driver:nightly")

    # host directory holding mount points, bind mounted into the mount pod at `pod_mount_base`
    mount_point_path = Path("JUICEFS_MOUNT_PATH", default=local.path("/var/lib/juicefs/volume"))
    jfs_config_path = Path("JUICEFS_CONFIG_PATH", default=local.path("/var/lib/juicefs/config"))
    pod_mount_base = Path("JUICEFS_POD_MOUNT_BASE", default=local.path("/jfs"))
    root_config_mount_path = local.path("/root/.juicefs")
    default_cache_dir = Path("JUICEFS_DEFAULT_CACHE_DIR", default=local.path("/var/jfsCache"))
    cache_volume_name_fmt = TypedEnv.Str("JUICEFS_CACHE_VOLUME_NAME_FMT", default=DEFAULT_CACHE_VOLUME_NAME_FMT)

    mount_pod_cpu_limit = TypedEnv.Str("JUICEFS_MOUNT_POD_CPU_LIMIT", default="5000m")
    mount_pod_mem_limit = TypedEnv.Str("JUICEFS_MOUNT_POD_MEM_LIMIT", default="5Gi")
    mount_pod_cpu_request = TypedEnv.Str("JUICEFS_MOUNT_POD_CPU_REQUEST", default="1000m")
    mount_pod_mem_request = TypedEnv.Str("JUICEFS_MOUNT_POD_MEM_REQUEST", default="1Gi")

    reference_prefix = TypedEnv.Str("JUICEFS_REFERENCE_PREFIX", default=DEFAULT_REFERENCE_PREFIX)
    _bookkeeping_annotations = TypedEnv.Str("JUICEFS_BOOKKEEPING_ANNOTATIONS", default="")  # For example: "juicefs-uniqueid,juicefs-delete-delay"

    @property
    def bookkeeping_annotations(self):
        s = self._bookkeeping_annotations.strip()
        return frozenset(p.strip() for p in s.split(",") if p.strip())

    @property
    def mount_pod_resources(self):
        from .resources import ResourceRequirement
        return ResourceRequirement.from_config(self)
