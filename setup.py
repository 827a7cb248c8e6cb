# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

from setuptools import setup, find_namespace_packages
import re


with open("README.md", "r") as fh:
    _long_description = fh.read()


filename = "azure-iot-registry-sample/azure/iot/registry_sample/constant.py"
version = None

with open(filename, "r") as fh:
    if not re.search("\n+VERSION", fh.read()):
        raise ValueError("VERSION  is not defined in constants.")

with open(filename, "r") as fh:
    for line in fh:
        if re.search("^VERSION", line):
            constant, value = line.strip().split("=")
            if not value:
                raise ValueError("Value for VERSION not defined in constants.")
            else:
                # Strip whitespace and quotation marks
                version = value.strip(' "')
            break

setup(
    name="azure-iot-registry-sample",
    version=version,
    description="Microsoft Azure IoTHub Registry Manager Sample",
    license="MIT License",
    url="https://github.com/Azure/azure-iot-sdk-python/",
    author="Microsoft Corporation",
    author_email="opensource@microsoft.com",
    long_description=_long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    install_requires=[
        "msrest>=0.6.21,<1.0.0",
        "requests>=2.32.3,<3.0.0",
        "azure-iot-device>=2.12.0,<3.0.0",
    ],
    extras_require={"test": ["pytest", "pytest-mock", "pytest-testdox"]},
    python_requires=">=3.8, <4",
    packages=find_namespace_packages(
        where="azure-iot-registry-sample", include=["azure.iot.registry_sample*"]
    ),
    package_dir={"": "azure-iot-registry-sample"},
    zip_safe=False,
)
