#!/usr/bin/env python3
"""
Setup script for Bluebikes Station Traffic Map
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="bluebikes-station-traffic",
    version="1.0.0",
    author="Bluebikes Traffic Map Team",
    description="Interactive map of bike-share station traffic with a time-of-day filter",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["bluebikes_traffic", "bluebikes_traffic.*"]),
    py_modules=["app"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "bluebikes-map=app:run",
        ],
    },
    include_package_data=True,
    package_data={
        "bluebikes_traffic.maps": ["*.md"],
    },
)
