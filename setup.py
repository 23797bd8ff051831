from setuptools import setup, find_packages

setup(
    name="dust-helper",
    version="1.3.2",
    description="Dependency-aware helper for building packages from a remote source-package repository.",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "rich>=13.0.0",
        "GitPython>=3.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dust=dust.modules.cli:main",
        ],
    },
)
