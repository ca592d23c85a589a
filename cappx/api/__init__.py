"""Resource types describing Proxmox clusters, machines and their settings."""