#!/usr/bin/env python3

import pathlib

from setuptools import find_packages, setup

# The directory containing this file
HERE = pathlib.Path(__file__).parent

# The text of the README file
README = (HERE / "README.md").read_text()

# Version
__version__ = "0.1.0"

setup(
    name="anchorflow",
    version=__version__,
    author="AnchorFlow Development Team",
    author_email="anchorflow@example.com",
    description="Multi-sample dispatch for DHS-anchor chromatin interaction analyses",
    long_description=README,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["anchorflow", "anchorflow.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.8",
    install_requires=[
        # Run summaries
        "pandas>=1.3.0",
        # Configuration and utilities
        "pyyaml>=6.0",
        "click>=8.0.0",
        "colorlog>=6.6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
        "dev": [
            "black>=22.0.0",
            "isort>=5.10.0",
            "flake8>=5.0.0",
            "mypy>=0.991",
            "pre-commit>=2.20.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "anchorflow=anchorflow.cli:main",
        ],
    },
    zip_safe=False,
    keywords=[
        "chromatin",
        "DHS",
        "enhancer-promoter",
        "3D-genomics",
        "bioinformatics",
        "pipeline",
        "slurm",
    ],
)
