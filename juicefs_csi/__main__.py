import sys
import argparse
from easypy.bunch import Bunch


def main():
    parser = argparse.ArgumentParser(
        description="JuiceFS mount pod tooling")
    parser.set_defaults(func=lambda *_, **__: parser.print_help())

    subparsers = parser.add_subparsers()

    info_parse = subparsers.add_parser("info", help='Print versioning information and mount pod defaults')
    info_parse.add_argument("--output", default="json", choices=['json', 'yaml'], help="Output format")
    info_parse.set_defaults(func=_info)

    render_parse = subparsers.add_parser("render", help='Print the mount pod manifest for a mount command')
    render_parse.add_argument("--name", required=True, help="Mount pod name")
    render_parse.add_argument("--cmd", required=True, help="juicefs mount command line")
    render_parse.add_argument("--output", default="yaml", choices=['json', 'yaml'], help="Output format")
    render_parse.set_defaults(func=_render)

    test_parse = subparsers.add_parser("test", help='Start unit tests')
    test_parse.set_defaults(func=_test)

    args = parser.parse_args(namespace=Bunch())
    return args.pop("func")(args)


def _dump(data, output):
    if output == "yaml":
        import yaml
        yaml.safe_dump(data, sys.stdout, sort_keys=False)
    elif output == "json":
        import json
        json.dump(data, sys.stdout, indent=2)
    else:
        assert False, f"invalid output format: {output}"


def _info(args):
    from . configuration import Config
    from . exceptions import Abort
    conf = Config()
    try:
        mount_pod_resources = conf.mount_pod_resources.to_dict()
    except Abort as exc:
        sys.exit(f"{exc.code.name}: {exc.message}")
    info = dict(
        name=conf.plugin_name, version=conf.plugin_version, namespace=conf.namespace,
        mount_pod_resources=mount_pod_resources,
        reference_prefix=conf.reference_prefix,
    )
    _dump(info, args.output)


def _render(args):
    from . configuration import Config
    from . logging import init_logging
    from . exceptions import Abort
    from . mount_pod import build_mount_pod
    conf = Config()
    init_logging(conf.log_level)
    try:
        pod = build_mount_pod(conf, name=args.name, cmd=args.cmd)
    except Abort as exc:
        sys.exit(f"{exc.code.name}: {exc.message}")
    _dump(pod, args.output)


def _test(args):
    """Runs the tests without code coverage"""
    import pytest
    sys.exit(pytest.main(["-x", "tests", "-s", "-v"]))


if __name__ == '__main__':
    main()
