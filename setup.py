import setuptools

with open('./README.md', mode='r') as f:
    long_description = f.read()


setuptools.setup(
    name="bplus-py",
    version="0.1",
    description="bplus, in-memory B+ tree with sorted, linked leaves. no third party dependency.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    # install_requires=[''],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.6",
)
