from setuptools import setup

from noderegression import __version__

# all of these should be python 3 compatible
DEPENDENCIES = [
    "colorama>=0.4.1",
    "configobj>=5.0.6",
    "mozfile>=2.0.0",
    "mozinfo>=1.1.0",
    "mozlog>=4.0",
    "redo>=2.0.2",
    "requests>=2.21.0",
]

TEST_DEPENDENCIES = [
    "mock>=3.0.5",
    "pytest>=5.0",
    "pytest-mock>=1.10",
]

desc = """Regression range finder for Node.js nightly builds"""
long_desc = """Regression range finder for Node.js nightly builds.
Runs a test command against the nightly builds published at
https://nodejs.org/download/nightly/ and finds the first bad one."""

setup(
    name="noderegression",
    version=__version__,
    description=desc,
    long_description=long_desc,
    license="MPL 2.0",
    packages=["noderegression"],
    entry_points="""
          [console_scripts]
          noderegression = noderegression.main:main
        """,
    platforms=["Any"],
    python_requires=">=3.7",
    install_requires=DEPENDENCIES,
    extras_require={"test": TEST_DEPENDENCIES},
    classifiers=[
        "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)",
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3 :: Only",
    ],
)
