import pytest
from juicefs_csi.mount_options import parse_mount_options, parse_mount_command, split_list, MountOptions


@pytest.mark.parametrize("text, expected", [
    ("", []),
    (None, []),
    ("a", [("a", None)]),
    ("a=1,b", [("a", "1"), ("b", None)]),
    ("a=1,,b=2", [("a", "1"), ("b", "2")]),
    (",a=1,", [("a", "1")]),
    (",,,", []),
    ("a=,b", [("a", ""), ("b", None)]),
    ("=x,a", [("a", None)]),
    (" a = 1 , b", [("a", "1"), ("b", None)]),
    ("metrics=0.0.0.0:9567", [("metrics", "0.0.0.0:9567")]),
    ("k=v=w", [("k", "v=w")]),
    ("a=1,a=2", [("a", "1"), ("a", "2")]),
])
def test_parse_mount_options(text, expected):
    assert parse_mount_options(text).items() == expected


def test_repeated_keys_last_wins():
    options = parse_mount_options("cache-dir=/a,cache-size=100,cache-dir=/b")

    assert options.get("cache-dir") == "/b"
    assert options.get_all("cache-dir") == ["/a", "/b"]
    assert "cache-size" in options
    assert "cache" not in options
    assert options.get("missing") is None
    assert options.get("missing", "x") == "x"
    assert len(options) == 3


@pytest.mark.parametrize("value, expected", [
    ("/a:/b", ["/a", "/b"]),
    ("/a", ["/a"]),
    ("/a::/b:", ["/a", "/b"]),
    (":", []),
    ("", []),
    (None, []),
])
def test_split_list(value, expected):
    assert split_list(value) == expected


class TestMountCommandSuite:

    def test_without_options(self):
        cmd = parse_mount_command("/bin/mount.juicefs redis://127.0.0.1:6379/0 /jfs/default-imagenet")

        assert cmd.binary == "/bin/mount.juicefs"
        assert cmd.meta_url == "redis://127.0.0.1:6379/0"
        assert cmd.mount_point == "/jfs/default-imagenet"
        assert cmd.options == MountOptions()
        assert not cmd.options
        assert cmd.extra_args == ()

    def test_with_options(self):
        cmd = parse_mount_command("/bin/mount.juicefs redis://h/0 /jfs/vol -o cache-size=10240,prefetch=1")

        assert cmd.mount_point == "/jfs/vol"
        assert cmd.options.items() == [("cache-size", "10240"), ("prefetch", "1")]

    def test_repeated_option_flags(self):
        cmd = parse_mount_command("juicefs redis://h/0 /jfs/vol -o a=1 -o b=2,a=3")

        assert cmd.options.items() == [("a", "1"), ("b", "2"), ("a", "3")]
        assert cmd.options.get("a") == "3"

    def test_options_before_positionals(self):
        cmd = parse_mount_command("juicefs -o a=1 redis://h/0 /jfs/vol")

        assert cmd.meta_url == "redis://h/0"
        assert cmd.mount_point == "/jfs/vol"
        assert cmd.options.get("a") == "1"

    def test_trailing_option_flag(self):
        cmd = parse_mount_command("juicefs redis://h/0 /jfs/vol -o")

        assert cmd.mount_point == "/jfs/vol"
        assert not cmd.options

    def test_quoted_arguments(self):
        cmd = parse_mount_command("juicefs 'redis://:pass word@h/0' /jfs/vol -o \"cache-dir=/a b\"")

        assert cmd.meta_url == "redis://:pass word@h/0"
        assert cmd.options.get("cache-dir") == "/a b"

    def test_unbalanced_quotes(self):
        cmd = parse_mount_command("juicefs 'redis://h/0 /jfs/vol -o cache-dir=/a")

        assert cmd.meta_url == "'redis://h/0"
        assert cmd.options.get("cache-dir") == "/a"

    @pytest.mark.parametrize("raw", ["", None, "   "])
    def test_empty_command(self, raw):
        cmd = parse_mount_command(raw)

        assert (cmd.binary, cmd.meta_url, cmd.mount_point) == ("", "", "")
        assert not cmd.options
