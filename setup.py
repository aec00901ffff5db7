from setuptools import setup, find_packages
import os
import re

# Import version from GeoCSC/__init__.py
with open(os.path.join('GeoCSC', '__init__.py'), 'r') as f:
    version = re.search(r"__version__\s*=\s*'(.*)'", f.read()).group(1)

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="GeoCSC",
    version=version,
    description="Read-only country, state and city lookups over a static dataset, with a REST API and CLI",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(include=["GeoCSC", "GeoCSC.*"]),
    include_package_data=True,
    package_data={
        "GeoCSC": ["data/*.json", "data/*.yml"],
    },
    python_requires=">=3.8",
    install_requires=[
        "flask>=2.2.0",
        "click>=8.0.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "deploy": ["gunicorn>=21.2.0"],
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "GeoCSC=GeoCSC.__main__:main",
        ],
    },
)
