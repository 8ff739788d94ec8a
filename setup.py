# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from setuptools import find_packages, setup
from src.routesync import __version__ as version

# runtime dependencies of the Lambda handler
REQUIRED_PACKAGES = [
    'boto3 >= 1.34.0',
    'python-dateutil >= 2.9.0',
    'overrides >= 7.4.0',
    'pydantic >= 2.5.0',
    'shortuuid >= 1.0.13',
]

TEST_PACKAGES = [
    'moto >= 5.0.0',
    'pytest',
    'mock'
]

setup(
    name="routesync",
    python_requires=">=3.10",
    version=version,
    description="routesync propagates the main route table's network interface route to the custom route tables of a VPC.",
    keywords="aws vpc ec2 route table network interface eni sync lambda api gateway sns",
    author="Amazon.com Inc.",
    license="Apache 2.0",

    packages=find_packages(where="src", exclude=("test",)),
    package_dir={"": "src"},
    entry_points={
        'console_scripts': [
            'routesync-invoke = routesync.control.api:main',
        ],
    },
    install_requires=REQUIRED_PACKAGES,
    extras_require={
        'test': TEST_PACKAGES,
    },
    include_package_data=True,
)
