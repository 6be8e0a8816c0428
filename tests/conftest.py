import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
# Extend python import path to get juicefs_csi package from here
sys.path += [ROOT.as_posix()]

from juicefs_csi.configuration import Config


CMD_WITHOUT_CACHE_DIR = "/bin/mount.juicefs redis://127.0.0.1:6379/0 /jfs/default-imagenet"
CMD_WITH_CACHE_DIR = (
    "/bin/mount.juicefs redis://127.0.0.1:6379/0 /jfs/default-imagenet"
    " -o prefetch=1,cache-dir=/dev/shm/imagenet,cache-size=10240,open-cache=7200,metrics=0.0.0.0:9567"
)
CMD_WITH_TWO_CACHE_DIRS = (
    "/bin/mount.juicefs redis://127.0.0.1:6379/0 /jfs/default-imagenet"
    " -o cache-dir=/dev/shm/imagenet-0:/dev/shm/imagenet-1,cache-size=10240,metrics=0.0.0.0:9567"
)


@pytest.fixture
def config():
    """
    Config factory.
    Variables are read from provided dict instead of process environment.
    """

    def __wrapped(**env) -> Config:
        env.setdefault("NODE_NAME", "node-1")
        return Config(env=env)

    return __wrapped
