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
from enum import IntEnum


class OmciError(Exception):
    pass


class DecodeError(OmciError):
    """Raw bytes could not be read into the fixed OMCI frame layout"""


class MalformedRequestError(OmciError):
    pass


class UnsupportedMessageError(OmciError):
    """No handler is registered for the decoded message type"""

    def __init__(self, message_type):
        super(UnsupportedMessageError, self).__init__(
            'Unimplemented omci msg type {}'.format(message_type))
        self.message_type = message_type


class NotFoundError(OmciError, KeyError):
    pass


class OmciHandlerError(OmciError):
    pass


# Baseline message set, without the trailer
OMCI_FRAME_LENGTH = 40
OMCI_HEADER_LENGTH = 4
OMCI_CONTENT_LENGTH = 32

# Byte 2 of a request: bits 7-5 are the DB/AR/AK flags, bits 4-0 the type
OMCI_MSG_TYPE_MASK = 0x1F
OMCI_RESPONSE_FLAGS = 0x20

OMCI_RESULT_OFFSET = 8
OMCI_MIN_RESPONSE_LENGTH = OMCI_RESULT_OFFSET + 1

OmciNullPointer = 0xffff


class OmciMsgType(IntEnum):
    # keep these numbers match msg_type field per OMCI spec
    Create = 4
    Delete = 6
    Set = 8
    Get = 9
    GetAllAlarms = 11
    GetAllAlarmsNext = 12
    MibUpload = 13
    MibUploadNext = 14
    MibReset = 15
    AlarmNotification = 16
    AttributeValueChange = 17
    Test = 18
    StartSoftwareDownload = 19
    DownloadSection = 20
    EndSoftwareDownload = 21
    ActivateSoftware = 22
    CommitSoftware = 23
    SynchronizeTime = 24
    Reboot = 25
    GetNext = 26
    TestResult = 27
    GetCurrentData = 28
    SetTable = 29       # Defined in Extended Message Set Only


def msg_type_name(message_type):
    try:
        return OmciMsgType(message_type).name
    except ValueError:
        return str(message_type)


# MIB upload responses carry their own body shape
MIB_UPLOAD_MSG_TYPES = frozenset([
    OmciMsgType.MibUpload,
    OmciMsgType.MibUploadNext,
    OmciMsgType.MibReset,
])


class OmciClass(IntEnum):
    # Managed entity class ids used by the simulator
    OntData = 2
    EthernetPMHistoryData = 24
    MacBridgePortConfigurationData = 47
    Ieee8021pMapperServiceProfile = 130
    OntG = 256
    AniG = 263
    GemPortNetworkCtp = 268
    FecPerformanceMonitoringHistoryData = 312


class ReasonCodes(IntEnum):
    # OMCI Result and reason codes
    Success = 0             # Command processed successfully
    ProcessingError = 1     # Command processing error
    NotSupported = 2        # Command not supported
    ParameterError = 3      # Parameter error
    UnknownEntity = 4       # Unknown managed entity
    UnknownInstance = 5     # Unknown managed entity instance
    DeviceBusy = 6          # Device busy
    InstanceExists = 7      # Instance Exists
    AttributeFailure = 9    # Attribute(s) failed or unknown
