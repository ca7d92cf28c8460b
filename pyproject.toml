[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdfsmith"
version = "0.1.0"
description = "Building blocks for writing PDF files: TrueType parsing and subsetting, JPEG/PNG embedding, RC4 encryption and PDF object writers"
requires-python = ">=3.10"
dependencies = []
keywords = ["pdf", "truetype", "font", "subset", "png", "jpeg", "rc4", "outline"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Printing",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Processing :: Fonts",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pdfsmith"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
