[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysprobe"
version = "0.1.0"
description = "Read procfs, sysfs and device information, parse versions and decode SMBIOS tables and pci.ids"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "system",
    "probe",
    "procfs",
    "sysfs",
    "smbios",
    "pci",
    "pci-ids",
    "version",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Hardware",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sysprobe-pciids = "sysprobe.pciids:main"

[tool.hatch.build.targets.wheel]
packages = ["sysprobe"]

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
