"""
Setup script for confladder package.
"""

from setuptools import setup, find_packages

setup(
    name="confladder",
    version="1.0.0",
    description="Hierarchical, environment-aware configuration loader",
    author="confladder Team",
    packages=find_packages(include=["confladder", "confladder.*"]),
    python_requires=">=3.8",
    install_requires=[
        # Core dependencies
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",

        # Configuration formats
        "json5>=0.9.0",
        "hjson>=3.1.0",
        "toml>=0.10.2",

        # Utilities
        "python-dateutil>=2.8.0",
        "pytz>=2023.3",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "confladder=confladder.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
