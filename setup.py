from setuptools import find_packages, setup

setup(
    name="demandhub",
    version="0.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "requests",
        "click",
    ],
    extras_require={
        "test": [
            "pytest",
            "fastapi",
            "uvicorn",
            "python-multipart",
        ],
    },
    entry_points={
        "console_scripts": [
            "demandhub=demandhub.cli:cli",
        ],
    },
)
