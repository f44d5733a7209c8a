from setuptools import setup, find_packages

setup(
    name="mobinspect-core",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
        "lxml>=4.9",
    ],
    extras_require={
        "tests": ["pytest"],
    },
    python_requires=">=3.8",
    package_data={
        "mobinspect_core": ["schemas/*.json"],
    },
)
