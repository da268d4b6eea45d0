[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zeroplugins"
version = "0.1.0"
description = "Logic for group-chat bot plugins: emoji mixing, drift bottles, jokes, gacha, song guessing, fortunes and more"
requires-python = ">=3.10"
keywords = ["chatbot", "plugins", "gacha", "emoji", "fortune", "drift bottle"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "requests",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["zeroplugins"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
