# -*- coding: utf-8 -*-

import os

from setuptools import find_packages, setup


def read_version():
    version = {}
    with open(os.path.join("src", "c2c", "version.py")) as f:
        exec(f.read(), version)
    return version["version"]


if __name__ == "__main__":
    setup(
        name="c2c",
        version=read_version(),
        description="Bottom-up change detection for annual time series",
        license="BSD-3-Clause",
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[
            "numpy>=1.21",
            "scipy>=1.8",
            "scikit-learn>=1.6",
            "joblib>=1.2",
        ],
        extras_require={
            "plot": ["matplotlib>=3.5"],
            "test": ["pytest>=7", "matplotlib>=3.5"],
        },
        entry_points={
            "console_scripts": ["c2c = c2c.cli:main"],
        },
    )
