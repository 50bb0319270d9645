"""synclab setup - offline submissions, replayed in order."""
from setuptools import setup, find_packages

setup(
    name="synclab",
    version="1.0.0",
    description="synclab: offline submission sync engine",
    packages=find_packages(include=["synclab", "synclab.*", "synclab_cli", "synclab_cli.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "synclab=synclab_cli.main:cli",
        ],
    },
)
