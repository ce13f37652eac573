"""
Setup script for the recruitment-portal project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="recruitment-portal",
    version="0.3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["version"],
    include_package_data=True,
    package_data={"portal": ["templates/*.html", "templates/*/*.html"]},
    python_requires=">=3.11",
    install_requires=[
        "flask>=3.0",
        "requests>=2.31",
        "python-dotenv>=1.0",
        "pydantic>=2.7",
        "pydantic-settings>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-mock>=3.12",
        ],
    },
)
