[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cappx"
version = "0.1.0"
description = "Proxmox VE machine resources, cloud-init user data and a pluggable QEMU scheduler for cluster provisioning"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "proxmox",
    "qemu",
    "cluster-api",
    "cloud-init",
    "scheduler",
    "virtualization",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cappx"]

[tool.hatch.build.targets.sdist]
include = [
    "cappx",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
