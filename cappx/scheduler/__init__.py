"""Scheduler that places new QEMU instances on Proxmox nodes and assigns their ids."""