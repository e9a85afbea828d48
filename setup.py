"""
Setup script for csrkit

Package metadata and dependencies live here; pyproject.toml only declares
the build backend and pytest settings. Kernels are compiled by numba at
first use, so there is no native build step.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/csrkit/__init__.py
def get_version():
    version_file = Path("src/csrkit/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="csrkit",
    version=get_version(),
    description="Kind-specialized row reduction kernels for CSR sparse matrices",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.22",
        "scipy>=1.8",
        "numba>=0.57",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    zip_safe=False,
)
