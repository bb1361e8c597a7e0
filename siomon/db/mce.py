"""MCA (Machine Check Architecture) bank names and error code classification."""


def amd_smca_bank_name(bank: int) -> str:
    """AMD SMCA bank type name by bank index (Zen 3/4/5 layout)."""
    if bank == 0:
        return "Load-Store"
    if bank == 1:
        return "Instruction Fetch"
    if bank in (2, 3):
        return "L2 Cache"
    if bank == 4:
        return "Decode"
    if bank == 5:
        return "Execution"
    if bank in (6, 7):
        return "Floating Point"
    if 8 <= bank <= 11:
        return "L3 Cache"
    if bank in (12, 13):
        return "Coherent Slave"
    if bank == 14:
        return "Platform Interface"
    if 15 <= bank <= 19:
        return "MCA Extension"
    if bank in (20, 21):
        return "Unified Memory Controller"
    if bank in (22, 23):
        return "UMC Extension"
    if bank in (24, 25):
        return "Parameter Block"
    if bank in (26, 27):
        return "PSP"
    if bank in (28, 29):
        return "SMU"
    if bank in (30, 31):
        return "NBIO/PCIe"
    return "Unknown"


_INTEL_BANKS = {
    0: "DCU",
    1: "IFU",
    2: "DTLB",
    3: "MLC",
    4: "PCU",
    5: "UPI/QPI",
    6: "IIO",
    7: "M2M",
    8: "M2M",
    9: "M2M",
    10: "CHA",
    11: "CHA",
    12: "IMC",
    13: "IMC",
    14: "IMC",
    15: "IMC",
    16: "CHA",
    17: "CHA",
    18: "CHA",
    19: "CHA",
}


def intel_mca_bank_name(bank: int) -> str:
    """Intel MCA bank type name by bank index (Skylake through Sapphire Rapids)."""
    return _INTEL_BANKS.get(bank, "Bank")


def mca_error_type(error_code: int) -> str:
    """Classify MCA_STATUS ErrorCode[15:0] into a human-readable error type."""
    if error_code == 0:
        return "No Error"
    if error_code & 0x0800:
        return "Bus/Interconnect Error"
    if error_code & 0x0F00 == 0x0100:
        return "Memory/Cache Error"
    if error_code & 0x0FF0 == 0x0010:
        return "TLB Error"
    return "Internal Error"