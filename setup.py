from setuptools import setup, find_packages

setup(
    name="spinblock",
    version="1.0.0",
    description="Online keep/compress/discard policies and Karlin's randomized spin-block bound",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="spinblock Authors",
    packages=find_packages(exclude=("tests", "benchmarks")),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "scipy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["spinblock=spinblock.cli:main"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: System :: Distributed Computing",
    ],
    keywords="spin-block, ski rental, online algorithms, competitive ratio, karlin",
)
