[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kubeswitch"
version = "0.1.0"
description = "Kubeconfig editing, context aliases, switch history and namespace caching for switching between Kubernetes contexts"
requires-python = ">=3.10"
keywords = ["kubernetes", "kubeconfig", "kubectl", "context", "namespace"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "ruamel-yaml>=0.17",
    "tabulate>=0.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[tool.hatch.build.targets.wheel]
packages = ["kubeswitch"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
