"""Names of the built-in scheduler plugins."""

# filter plugins
NODE_NAME = "NodeName"
NODE_REGEX = "NodeRegex"
CPU_OVERCOMMIT = "CPUOvercommit"
MEMORY_OVERCOMMIT = "MemoryOvercommit"

# score plugins
RANDOM = "Random"
NODE_RESOURCE = "NodeResource"

# vmid plugins
RANGE = "Range"
REGEX = "Regex"