"""setup.py for TSLN (Time-Series Lean Notation).

Pure-Python package; numpy drives field profiling, pandas the DataFrame
integration and CSV baseline, rich the CLI output.
"""

from setuptools import find_packages, setup

setup(
    name="tsln",
    version="1.0.0",
    description="Token-lean, lossless text notation for time-series data fed to LLMs",
    packages=find_packages(include=["tsln", "tsln.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "pandas>=2.0,<3",
        "rich>=13.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "tsln=tsln.__main__:main",
        ],
    },
)
