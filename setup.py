from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="nviz",
    version="0.1.0",
    description="Hierarchical filtering and layer explosion for multi-layer network topologies.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"nviz": ["schemas/*.json"]},
    install_requires=["pyyaml", "jsonschema"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["nviz=nviz.cli:main"]},
    python_requires=">=3.10",
)
