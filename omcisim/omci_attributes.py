#
# Copyright 2017 the original author or authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
"""
Stand-in attribute values for Get requests.

Until a real MIB model backs the simulator, a handful of managed entity
classes answer Get with fixed attribute bytes at offsets 9-10 of the reply.
"""
from omcisim.omci_defs import OmciClass


def _fixed(value):
    return lambda content: value


SIMULATED_GET_ATTRIBUTES = {
    OmciClass.Ieee8021pMapperServiceProfile: _fixed(b'\x00\x78'),
    OmciClass.MacBridgePortConfigurationData: _fixed(b'\x0f\xb8'),
    # High byte echoes the first content byte of the request (0xBE in practice)
    OmciClass.FecPerformanceMonitoringHistoryData:
        lambda content: bytes(bytearray([content[0], 0x00])),
}


def simulated_get_attributes(entity_class, content,
                             table=SIMULATED_GET_ATTRIBUTES):
    """
    :param entity_class: (int) ME class id of the Get request
    :param content: (bytes) 32 byte request content
    :return: (bytes) attribute bytes, or None if the class is not simulated
    """
    value_fn = table.get(entity_class)
    return value_fn(content) if value_fn is not None else None
