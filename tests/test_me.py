from siomon.collectors.me import ManagementEngine, collect


def _mei(root, name, fw_ver=None):
    directory = root / "sys/class/mei" / name
    directory.mkdir(parents=True)
    if fw_ver is not None:
        (directory / "fw_ver").write_text(f"{fw_ver}\n")
    return directory


def test_collect_reads_firmware_version(tmp_path):
    path = _mei(tmp_path, "mei0", "0:16.1.25.2124")
    assert collect(tmp_path) == ManagementEngine(
        firmware_version="0:16.1.25.2124", device_path=str(path)
    )


def test_collect_skips_devices_without_version(tmp_path):
    _mei(tmp_path, "mei0")
    path = _mei(tmp_path, "mei1", "0:18.0.5.2141")
    result = collect(tmp_path)
    assert result.device_path == str(path)
    assert result.firmware_version == "0:18.0.5.2141"


def test_collect_without_mei(tmp_path):
    assert collect(tmp_path) is None