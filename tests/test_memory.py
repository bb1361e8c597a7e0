from siomon.collectors.base import SystemInfo
from siomon.collectors.memory import (
    MemoryCollector,
    MemoryType,
    collect,
    filter_placeholder,
    parse_dmi_type17,
    parse_meminfo,
    parse_memory_type,
)

DMI_SAMPLE = """\
# dmidecode 3.5
Getting SMBIOS data from sysfs.
SMBIOS 3.5.0 present.

Handle 0x0040, DMI type 17, 92 bytes
Memory Device
\tTotal Width: 72 bits
\tData Width: 64 bits
\tSize: 16 GB
\tForm Factor: DIMM
\tLocator: DIMM_A1
\tBank Locator: BANK 0
\tType: DDR5
\tType Detail: Synchronous Unbuffered (Unregistered)
\tSpeed: 4800 MT/s
\tManufacturer: Example Memory
\tSerial Number: 00000000
\tPart Number: EXAMPLE-PART
\tRank: 2
\tConfigured Memory Speed: 4800 MT/s
\tConfigured Voltage: 1.1 V

Handle 0x0041, DMI type 17, 92 bytes
Memory Device
\tTotal Width: Unknown
\tData Width: Unknown
\tSize: No Module Installed
\tLocator: DIMM_A2
\tType: Unknown

Handle 0x0042, DMI type 17, 92 bytes
Memory Device
\tTotal Width: 64 bits
\tData Width: 64 bits
\tSize: 8192 MB
\tLocator: DIMM_B1
\tType: SDRAM
\tManufacturer: Not Specified
"""


def test_parse_memory_type_known():
    assert parse_memory_type("DDR4") == MemoryType.DDR4
    assert parse_memory_type("LPDDR5X") == MemoryType.LPDDR5X


def test_parse_memory_type_unknown_keeps_name():
    result = parse_memory_type("SDRAM")
    assert result == MemoryType.unknown("SDRAM")
    assert result.known is False


def test_filter_placeholder():
    assert filter_placeholder("0000 0000") is None
    assert filter_placeholder("   ") is None
    assert filter_placeholder("Not Specified") is None
    assert filter_placeholder("Unknown") is None
    assert filter_placeholder("  Example Memory ") == "Example Memory"


def test_parse_meminfo_scales_kb():
    info = parse_meminfo("MemTotal:       16384 kB\nHugePages_Total:       3\n")
    assert info["MemTotal"] == 16384 * 1024
    assert info["HugePages_Total"] == 3


def test_parse_dmi_skips_empty_slots():
    dimms = parse_dmi_type17(DMI_SAMPLE)
    assert [d.locator for d in dimms] == ["DIMM_A1", "DIMM_B1"]


def test_parse_dmi_first_dimm():
    dimm = parse_dmi_type17(DMI_SAMPLE)[0]
    assert dimm.size_bytes == 16 * 1024 * 1024 * 1024
    assert dimm.memory_type == MemoryType.DDR5
    assert dimm.bank_locator == "BANK 0"
    assert dimm.form_factor == "DIMM"
    assert dimm.max_speed_mts == 4800
    assert dimm.configured_speed_mts == 4800
    assert dimm.configured_voltage_mv == 1100
    assert dimm.data_width_bits == 64
    assert dimm.total_width_bits == 72
    assert dimm.ecc is True
    assert dimm.rank == 2
    assert dimm.manufacturer == "Example Memory"
    assert dimm.part_number == "EXAMPLE-PART"
    assert dimm.serial_number is None


def test_parse_dmi_second_dimm_defaults():
    dimm = parse_dmi_type17(DMI_SAMPLE)[1]
    assert dimm.size_bytes == 8192 * 1024 * 1024
    assert dimm.ecc is False
    assert dimm.manufacturer is None
    assert dimm.memory_type.name == "SDRAM"
    assert dimm.form_factor == "Unknown"
    assert dimm.rank is None


def test_parse_dmi_empty_text():
    assert parse_dmi_type17("") == []


def test_collect_from_root(tmp_path):
    proc = tmp_path / "proc"
    proc.mkdir()
    (proc / "meminfo").write_text(
        "MemTotal: 2048 kB\nMemAvailable: 1024 kB\nSwapTotal: 0 kB\nSwapFree: 0 kB\n"
    )
    info = collect(tmp_path)
    assert info.total_bytes == 2048 * 1024
    assert info.available_bytes == 1024 * 1024
    assert info.swap_total_bytes == 0
    assert info.dimms == []
    assert info.populated_slots is None


def test_collect_missing_meminfo(tmp_path):
    info = collect(tmp_path)
    assert info.total_bytes == 0
    assert info.available_bytes == 0


def test_collector_fills_system_info(tmp_path):
    (tmp_path / "proc").mkdir()
    (tmp_path / "proc/meminfo").write_text("MemTotal: 4 kB\n")
    info = SystemInfo()
    MemoryCollector(root=tmp_path).collect_into(info)
    assert info.memory.total_bytes == 4 * 1024
    assert MemoryCollector.name == "memory"