"""
Setup script for markdown2pdf.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="markdown2pdf",
    version="2.0.3",
    packages=find_packages(include=["markdown2pdf", "markdown2pdf.*"]),
    package_data={"markdown2pdf": ["assets/*.css", "assets/*.json"]},
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "pydantic>=2",
        "pydantic-settings>=2",
        "playwright",
        "markdown-it-py>=3",
        "pygments",
        "mcp>=1.2,<2",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
            "beautifulsoup4",
        ],
    },
    entry_points={
        "console_scripts": [
            "markdown2pdf=markdown2pdf.__main__:main",
        ],
    },
)
