"""
Setup script for AtomCascade.
"""

from pathlib import Path

from setuptools import setup, find_packages

HERE = Path(__file__).parent


def read_version():
    """Version string from atomcascade/__init__.py."""
    init_file = HERE / "atomcascade" / "__init__.py"
    for line in init_file.read_text().splitlines():
        if line.startswith("__version__"):
            return line.split("=")[1].strip().strip('"').strip("'")
    return "0.0.0"


readme_file = HERE / "README.md"

setup(
    name="atomcascade",
    version=read_version(),
    description=(
        "Decay cascades of inner-shell excited ions and dielectronic-recombination "
        "pathways on top of external atomic-structure codes"
    ),
    long_description=readme_file.read_text() if readme_file.exists() else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Physics",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.8",
    install_requires=[
        # decay-graph vectors and sparse cycle detection
        "numpy>=1.20.0",
        "scipy>=1.7.0",
        # level tables and listings
        "pandas>=1.3.0",
        "pyyaml>=5.4.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "atomcascade=atomcascade.cli.main:main",
        ],
    },
)
