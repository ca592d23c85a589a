"""Proxmox VE machine resources, cloud-init user data and a pluggable QEMU scheduler."""

__version__ = "0.1.0"