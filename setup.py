from setuptools import setup, find_packages

setup(
    name="pcalc",
    version="0.1.0",
    description="pcalc — programmer's calculator: C-style expressions in u32/i32/u64/double/bignum at once",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="pcalc Project",
    python_requires=">=3.9",
    packages=find_packages(),
    entry_points={
        "console_scripts": [
            "pcalc=pcalc.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Utilities",
    ],
)
