from setuptools import setup, find_packages

setup(
    name="reflection",
    version="0.1.0",
    description="Pointer indirection resolver and primitive extractor for generic Python code",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
