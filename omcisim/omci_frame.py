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
from collections import namedtuple

import structlog
from scapy.compat import raw
from scapy.fields import ByteField, ShortField, StrFixedLenField
from scapy.packet import Packet

from omcisim.omci_defs import DecodeError, OmciClass, msg_type_name, \
    OMCI_FRAME_LENGTH, OMCI_HEADER_LENGTH, OMCI_CONTENT_LENGTH, \
    OMCI_MSG_TYPE_MASK

log = structlog.get_logger()


OmciRequest = namedtuple('OmciRequest', [
    'transaction_id',
    'device_id',
    'message_type',
    'entity_class',
    'entity_id',
    'content',
])


class OmciRequestFrame(Packet):
    name = "OmciRequestFrame"
    fields_desc = [
        ShortField("transaction_id", 0),
        ByteField("message_type", None),
        ByteField("device_id", 0x0a),
        ShortField("entity_class", None),
        ShortField("entity_id", 0),
        StrFixedLenField("content", b'\x00' * OMCI_CONTENT_LENGTH,
                         OMCI_CONTENT_LENGTH)
    ]


class OmciResponseHeader(Packet):
    """Offsets 0-3 of every reply"""
    name = "OmciResponseHeader"
    fields_desc = [
        ShortField("transaction_id", 0),
        ByteField("message_type", None),
        ByteField("device_id", 0x0a),
    ]


class OmciResponseResult(Packet):
    """Offsets 4-8 of the create/delete/set/get family of replies"""
    name = "OmciResponseResult"
    fields_desc = [
        ShortField("entity_class", None),
        ShortField("entity_id", 0),
        ByteField("success_code", 0),
    ]


class OmciMibResetResponse(Packet):
    name = "OmciMibResetResponse"
    fields_desc = [
        ShortField("entity_class", OmciClass.OntData),
        ShortField("entity_id", 0),
        ByteField("success_code", 0)
    ]


class OmciMibUploadResponse(Packet):
    name = "OmciMibUploadResponse"
    fields_desc = [
        ShortField("entity_class", OmciClass.OntData),  # Always 2 (ONT data)
        ShortField("entity_id", 0),
        ShortField("number_of_commands", 0)
    ]


class OmciMibUploadNextResponse(Packet):
    name = "OmciMibUploadNextResponse"
    fields_desc = [
        ShortField("entity_class", OmciClass.OntData),  # Always 2 (ONT data)
        ShortField("entity_id", 0),
        ShortField("object_entity_class", 0),
        ShortField("object_entity_id", 0),
        ShortField("object_attributes_mask", 0),
    ]


def parse_pkt(pkt):
    """
    Decode one OMCI request frame.

    Anything past the fixed 40 byte layout (such as the trailer) is
    ignored. The returned message type has its DB/AR/AK flag bits stripped.

    :param pkt: (bytes) raw OMCI frame
    :return: (OmciRequest) decoded fields
    :raises DecodeError: the input cannot be read into the frame layout
    """
    if not isinstance(pkt, (bytes, bytearray, memoryview)):
        raise DecodeError('Failed to read packet: unsupported type {}'.format(
            type(pkt).__name__))

    pkt = bytes(pkt)
    if len(pkt) < OMCI_FRAME_LENGTH:
        log.error('omci-frame-too-short', length=len(pkt),
                  omci_msg=pkt.hex())
        raise DecodeError('Failed to read packet: {} bytes, need {}'.format(
            len(pkt), OMCI_FRAME_LENGTH))

    frame = OmciRequestFrame(pkt[:OMCI_FRAME_LENGTH])

    request = OmciRequest(transaction_id=frame.transaction_id,
                          device_id=frame.device_id,
                          message_type=frame.message_type & OMCI_MSG_TYPE_MASK,
                          entity_class=frame.entity_class,
                          entity_id=frame.entity_id,
                          content=bytes(frame.content))

    log.debug('omci-frame-decoded',
              transaction_id=request.transaction_id,
              message_type=msg_type_name(request.message_type),
              me_class=request.entity_class,
              me_instance=request.entity_id,
              content=request.content.hex(),
              omci_msg=pkt.hex())
    return request


def build_response(omci_message=None):
    """
    Zero filled reply buffer with the request frame's length. When given,
    the scapy message body is placed right after the 4 byte header.
    """
    frame = bytearray(OMCI_FRAME_LENGTH)
    if omci_message is not None:
        body = raw(omci_message)
        frame[OMCI_HEADER_LENGTH:OMCI_HEADER_LENGTH + len(body)] = body
    return frame
