from setuptools import find_packages, setup

from meritjournal.version import MERITJOURNAL_VERSION

long_description = ""
with open("README.md") as ifp:
    long_description = ifp.read()

setup(
    name="merit-journal",
    version=MERITJOURNAL_VERSION,
    author="Merit Journal",
    description="Merit Journal: personal journaling backend",
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms="all",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python",
        "License :: OSI Approved :: Apache Software License",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    zip_safe=False,
    install_requires=[
        "fastapi>=0.100.0",
        "httptools",
        "psycopg2-binary>=2.9.1",
        "pydantic>=2.0",
        "pyjwt>=2.0",
        "sqlalchemy>=2.0",
        "uvicorn>=0.15.0",
    ],
    extras_require={
        "dev": ["alembic>=1.5", "black", "isort", "mypy"],
        "test": ["httpx", "pytest", "pytest-asyncio"],
        "distribute": ["setuptools", "twine", "wheel"],
    },
    entry_points={
        "console_scripts": ["meritjournal=meritjournal.entries.cli:main"],
    },
)
