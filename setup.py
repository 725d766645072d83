#!/usr/bin/env python

from setuptools import setup

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name="apple-iap",
    version="1.0.0",
    description="Validate Apple In-App Purchase (IAP) receipts and normalize purchases",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    keywords="iap appstore receipt django",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    packages=["apple_iap"],
    package_dir={"apple_iap": "apple_iap"},
    install_requires=[
        "Django>=3.2",
        "pytz",
        "requests",
    ],
    extras_require={"test": ["pytest", "pytest-django", "responses", "flake8"]},
)
