#!/usr/bin/env python3
"""
WPML Viewer - Setup Script
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = ""
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

setup(
    name="wpml-viewer",
    version="0.1.0",
    description="DJI waypoint mission parser and flight path reconstruction",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: GIS",
    ],
    packages=find_packages(where=".", include=["wpml_viewer", "wpml_viewer.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wpml-viewer=wpml_viewer.main:main",
        ],
    },
    include_package_data=True,
    data_files=[("config", ["config/default.yaml"])],
)
