#!/usr/bin/env python
# Copyright 2017-present Open Networking Foundation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from setuptools import setup

# Utility function to read the README file.
def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as fd:
        return fd.read()

setup(
    name = 'omcisim',
    version = '1.0.0-dev',
    author = 'Open Networking Foundation, et al',
    author_email = 'info@opennetworking.org',
    description = ('Simulated ONU OMCI responder for OLT integration testing'),
    license = 'Apache License 2.0',
    keywords = 'omci onu gpon simulator',
    packages=['omcisim'],
    package_data={'omcisim': ['omcisim.yml']},
    long_description=read('README.md'),
    python_requires='>=3.7',
    install_requires=[
        'scapy>=2.4.3',
        'structlog>=20.1.0',
        'twisted>=20.3.0',
        'pyyaml>=5.1',
    ],
    extras_require={
        'test': [
            'pytest',
            'mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'omcisim = omcisim.main:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Topic :: System :: Networking',
        'Programming Language :: Python',
        'License :: OSI Approved :: Apache Software License',
    ],
)
