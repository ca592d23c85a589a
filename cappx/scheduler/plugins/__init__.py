"""Filter, score and VMID plugins, and the registry that assembles them."""