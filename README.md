# siomon

Hardware information for Linux systems, read from sysfs and procfs.

siomon gathers what the kernel already exposes about a machine — memory
totals and modules, the motherboard and BIOS, PCI and USB devices, network
adapters, audio cards, batteries and the Intel Management Engine — and
returns it as plain Python objects (dataclasses). It also ships small
lookup tables for CPU codenames and Machine Check error classification,
and helpers for identifying CPUs from `/proc/cpuinfo`.

## Installation

Install the package into your environment with your usual tool; the only
runtime dependency is `psutil` (used to list the IP addresses of network
interfaces). The `test` extra pulls in `pytest`.

## What is inside

| Module | Purpose |
| --- | --- |
| `siomon.collectors.base` | `SystemInfo`, the `Collector` base class and sysfs reading helpers |
| `siomon.collectors.cpu_ident` | `/proc/cpuinfo` parsing, vendor detection and ARM core identification |
| `siomon.collectors.memory` | memory totals from `/proc/meminfo`, DIMMs from `dmidecode -t 17` |
| `siomon.collectors.motherboard` | board, system and BIOS details, chassis type, chipset ID, Secure Boot |
| `siomon.collectors.pci` | PCI devices, PCIe link state, AER counters |
| `siomon.collectors.usb` | USB devices and their negotiated speed |
| `siomon.collectors.network` | network adapters and their IP addresses |
| `siomon.collectors.audio` | ALSA sound cards and codecs |
| `siomon.collectors.battery` | batteries, charge state and wear |
| `siomon.collectors.me` | Intel Management Engine firmware version |
| `siomon.db.cpu_codenames` | `CpuVendor`, codenames by vendor/family/model and ARM part |
| `siomon.db.mce` | MCA bank names and error-code classes |

Each collector module has a `collect(root="/")` function, where `root` is
the file-system root that the `sys/` and `proc/` trees are read under, so
a captured copy of those trees can be inspected as well as the live
system. `network.collect` also takes `physical_only` (default `True`).
Each module except `me` also has a collector class (`AudioCollector`,
`BatteryCollector`, `UsbCollector`, `MotherboardCollector`,
`MemoryCollector`, `PciCollector`, `NetworkCollector`) whose
`collect_into(info)` stores its results on the matching field of a
`SystemInfo`:

```python
from siomon.collectors.base import SystemInfo
from siomon.collectors.pci import PciCollector
from siomon.collectors.usb import UsbCollector

info = SystemInfo()
for collector in (PciCollector(), UsbCollector()):
    collector.collect_into(info)

for device in info.pci_devices:
    print(device.address, device.vendor_name, device.device_name)
```

Some data only comes from the live system: DIMM details (by running
`dmidecode`) and interface IP addresses are read only when `root`
resolves to `/`. PCI vendor, device and class names come from a `pci.ids`
file under `root` (`usr/share/hwdata`, `usr/share/misc` or `usr/share`);
they are `None` when no such file exists.

## Examples

Look up names for raw identifiers:

```python
from siomon.db.cpu_codenames import CpuVendor, lookup_arm, lookup_with_brand
from siomon.db.mce import amd_smca_bank_name, mca_error_type

lookup_arm(0x41, 0xD0C)                         # 'Neoverse N1'
lookup_with_brand(CpuVendor.INTEL, 6, 0xB7, "")  # 'Raptor Lake'
amd_smca_bank_name(20)                          # 'Unified Memory Controller'
mca_error_type(0x0110)                          # 'Memory/Cache Error'
```

Parse PCI addresses and link speeds:

```python
from siomon.collectors.pci import parse_bdf, pcie_speed_to_gen

parse_bdf("0001:03:1a.3")            # (1, 3, 26, 3)
pcie_speed_to_gen("16.0 GT/s PCIe")  # 4
```

Identify a CPU from `/proc/cpuinfo` text:

```python
from siomon.collectors.cpu_ident import parse_cpuinfo, parse_hex_or_dec, vendor_from_procfs

entries = parse_cpuinfo(open("/proc/cpuinfo").read())
vendor_from_procfs(entries[0] if entries else None)
parse_hex_or_dec("0xd0c")            # 3340
```

Parse `dmidecode -t 17` output that was saved earlier:

```python
from siomon.collectors.memory import parse_dmi_type17

for dimm in parse_dmi_type17(text):
    print(dimm.locator, dimm.size_bytes, dimm.memory_type, dimm.ecc)
```

## What siomon does not do

- There is no command-line program; it is a library only.
- It does not read a configuration file.
- There are no per-board sensor labels or Super I/O voltage scaling
  tables, and no live sensor readings.
- There is no complete CPU collector (packages, topology, caches,
  frequencies); `siomon.collectors.cpu_ident` offers identification
  helpers only.
- GPUs and storage devices are not collected.
- The chipset is reported as the host bridge's `vendor:device` hex ID,
  not by name.

## Requirements

Linux with sysfs and procfs mounted. Some fields (board serial numbers,
DIMM details through `dmidecode`) are only readable as root; they are
left empty when access is denied.