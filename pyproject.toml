[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "helmgen"
version = "0.1.0"
description = "Turn Kubernetes pod specs, cert-manager resources and webhook configurations into Helm chart templates and values"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["kubernetes", "helm", "chart", "templates", "yaml", "webhook", "cert-manager"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["helmgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
