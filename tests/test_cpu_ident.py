from siomon.collectors.cpu_ident import (
    arm_implementer_name,
    gather_arm_info,
    parse_address_sizes,
    parse_arm_cpuinfo_ids,
    parse_arm_features,
    parse_cpuinfo,
    parse_hex_or_dec,
    read_midr_el1,
    vendor_from_procfs,
)
from siomon.db.cpu_codenames import CpuVendor


def _arm_entry():
    return {
        "processor": "0",
        "BogoMIPS": "48.00",
        "Features": "fp asimd evtstrm aes pmull sha1 sha2 crc32",
        "CPU implementer": "0x41",
        "CPU architecture": "8",
        "CPU variant": "0x1",
        "CPU part": "0xd0c",
        "CPU revision": "2",
    }


def test_parse_hex_or_dec_hex():
    assert parse_hex_or_dec("0x41") == 0x41
    assert parse_hex_or_dec("0xd0c") == 0xD0C
    assert parse_hex_or_dec("0X1A") == 0x1A


def test_parse_hex_or_dec_decimal():
    assert parse_hex_or_dec("65") == 65
    assert parse_hex_or_dec("0") == 0


def test_parse_hex_or_dec_invalid():
    assert parse_hex_or_dec("xyz") is None
    assert parse_hex_or_dec("") is None
    assert parse_hex_or_dec("0x") is None


def test_parse_hex_or_dec_overflow():
    assert parse_hex_or_dec("0x100000000") is None
    assert parse_hex_or_dec("4294967295") == 4294967295


def test_arm_implementer_name():
    assert arm_implementer_name(0x41) == "ARM"
    assert arm_implementer_name(0x61) == "Apple"
    assert arm_implementer_name(0xC0) == "Ampere"
    assert arm_implementer_name(0x51) == "Qualcomm"
    assert arm_implementer_name(0xFF) == "Unknown"


def test_parse_arm_cpuinfo_ids():
    entry = {
        "CPU implementer": "0x41",
        "CPU part": "0xd0c",
        "CPU variant": "0x1",
        "CPU revision": "2",
    }
    assert parse_arm_cpuinfo_ids(entry) == (0x41, 0xD0C, 0x1, 2)


def test_parse_arm_cpuinfo_ids_missing_fields():
    assert parse_arm_cpuinfo_ids({}) is None
    assert parse_arm_cpuinfo_ids({"CPU implementer": "0x41"}) is None


def test_parse_arm_cpuinfo_ids_defaults_variant_and_revision():
    entry = {"CPU implementer": "0x41", "CPU part": "0xd08"}
    assert parse_arm_cpuinfo_ids(entry) == (0x41, 0xD08, 0, 0)


def test_parse_arm_features():
    features_str = "fp asimd evtstrm aes pmull sha1 sha2 crc32 atomics"
    f = parse_arm_features(features_str)
    assert f.aes_ni
    assert f.sha
    assert f.sse4_2
    assert f.pclmulqdq
    assert f.raw_features == features_str


def test_parse_arm_features_none():
    f = parse_arm_features(None)
    assert not f.aes_ni
    assert not f.sha
    assert f.raw_features is None


def test_gather_arm_info_x86_entry(tmp_path):
    entry = {"vendor_id": "GenuineIntel", "model name": "Intel Core i7"}
    assert gather_arm_info(entry, tmp_path) is None


def test_gather_arm_info_arm_entry(tmp_path):
    info = gather_arm_info(_arm_entry(), tmp_path)
    assert info is not None
    assert info.vendor == CpuVendor.ARM
    assert info.codename == "Neoverse N1"
    assert "ARM" in info.brand
    assert "Neoverse N1" in info.brand
    assert info.brand == "ARM Neoverse N1"
    assert info.features.aes_ni
    assert info.features.sha


def test_gather_arm_info_unknown_part(tmp_path):
    entry = _arm_entry()
    entry["CPU part"] = "0xfff"
    info = gather_arm_info(entry, tmp_path)
    assert info.codename is None
    assert info.brand == "ARM (impl 0x41 part 0xfff r1p2)"


def test_gather_arm_info_none():
    assert gather_arm_info(None) is None


def test_read_midr_el1(tmp_path):
    midr = tmp_path / "sys/devices/system/cpu/cpu0/regs/identification/midr_el1"
    midr.parent.mkdir(parents=True)
    midr.write_text("0x00000000410fd0c2\n")
    assert read_midr_el1(tmp_path) == (0x41, 0xD0C, 0, 2)


def test_read_midr_el1_missing(tmp_path):
    assert read_midr_el1(tmp_path) is None


def test_gather_arm_info_prefers_midr(tmp_path):
    midr = tmp_path / "sys/devices/system/cpu/cpu0/regs/identification/midr_el1"
    midr.parent.mkdir(parents=True)
    midr.write_text("0x00000000410fd083\n")
    info = gather_arm_info(_arm_entry(), tmp_path)
    assert info.codename == "Cortex-A72"


def test_vendor_from_procfs_arm():
    assert vendor_from_procfs({"CPU implementer": "0x41"}) == CpuVendor.ARM


def test_vendor_from_procfs_x86():
    assert vendor_from_procfs({"vendor_id": "GenuineIntel"}) == CpuVendor.INTEL
    assert vendor_from_procfs({"vendor_id": "AuthenticAMD"}) == CpuVendor.AMD


def test_parse_address_sizes():
    entry = {"address sizes": "48 bits physical, 57 bits virtual"}
    assert parse_address_sizes(entry) == (48, 57)


def test_parse_address_sizes_missing():
    assert parse_address_sizes(None) == (None, None)
    assert parse_address_sizes({}) == (None, None)


def test_parse_cpuinfo_blocks():
    text = (
        "processor\t: 0\n"
        "vendor_id\t: GenuineIntel\n"
        "model name\t: Example CPU @ 3.00GHz\n"
        "\n"
        "processor\t: 1\n"
        "vendor_id\t: GenuineIntel\n"
        "\n"
    )
    entries = parse_cpuinfo(text)
    assert len(entries) == 2
    assert entries[0]["model name"] == "Example CPU @ 3.00GHz"
    assert entries[1]["processor"] == "1"


def test_parse_cpuinfo_empty():
    assert parse_cpuinfo("") == []