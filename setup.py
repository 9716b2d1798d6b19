from setuptools import setup, find_packages
import pathlib

here = pathlib.Path(__file__).parent.resolve()


setup(
    name="igwmodes",
    version="0.1.0",
    description="Internal gravity wave vertical modes for arbitrary ocean stratification",
    author="F. Hunter Akins",
    author_email="fakins@ucsd.edu",
    classifiers=[
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)"
    ],
    packages=["igwmodes"],
    python_requires=">=3.9, <4",
    install_requires=["numba", "numpy", "scipy"],
    extras_require={"test": ["pytest", "matplotlib"]},
)
