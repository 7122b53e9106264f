from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="logtally",
    version="0.1.0",
    description="Per-type instance counts and byte sizes for newline-delimited JSON logs.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=["pandas", "PyYAML"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["logtally = logtally.cli:main"]},
)
