"""Collectors for memory, motherboard, PCI, USB, network, audio, battery and ME details."""