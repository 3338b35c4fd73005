#!/usr/bin/env python3
"""certdeploy - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = [
        line.strip() for line in f.read().splitlines() if line.strip() and not line.startswith("#")
    ]

setup(
    name="certdeploy",
    version="1.0.0",
    description="Deploy TLS certificates to PAN-OS style appliances via their XML API",
    author="certdeploy Team",
    packages=find_packages(include=["certdeploy", "certdeploy.*"]),
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "certdeploy=certdeploy.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
