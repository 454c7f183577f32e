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
OMCI dispatch and response synthesis for simulated ONUs
"""
import structlog
from scapy.compat import raw

from omcisim.omci_attributes import simulated_get_attributes
from omcisim.omci_defs import DecodeError, MalformedRequestError, \
    UnsupportedMessageError, OmciMsgType, ReasonCodes, msg_type_name, \
    MIB_UPLOAD_MSG_TYPES, OMCI_HEADER_LENGTH, OMCI_RESULT_OFFSET, \
    OMCI_MIN_RESPONSE_LENGTH, OMCI_RESPONSE_FLAGS
from omcisim.omci_frame import parse_pkt, OmciResponseHeader, \
    OmciResponseResult
from omcisim.omci_handlers import default_handlers
from omcisim.omci_state import OnuKey, OnuStateStore

log = structlog.get_logger()

_ATTRIBUTE_OFFSET = OMCI_RESULT_OFFSET + 1


class OmciSim(object):
    """
    Answers OMCI requests on behalf of a fleet of simulated ONUs.

    Each request is decoded, the ONU's state is looked up (or created), and
    the handler registered for the message type builds the reply body. The
    engine then stamps the common header fields onto the reply.
    """
    def __init__(self, store=None, handlers=None):
        """
        :param store: (OnuStateStore) per-ONU state, a fresh one if None
        :param handlers: (dict) message type -> handler, defaults to a
                         handler for every known message type
        """
        self.store = store if store is not None else OnuStateStore()
        self._handlers = dict(handlers) if handlers is not None \
            else default_handlers(self.store)

    @property
    def handlers(self):
        return dict(self._handlers)

    def register(self, message_type, handler):
        """Add or replace the handler of a message type"""
        self._handlers[int(message_type)] = handler

    def unregister(self, message_type):
        self._handlers.pop(int(message_type), None)

    def handle(self, intf_id, onu_id, request):
        """
        Build the reply to one OMCI request

        :param intf_id: (int) PON interface id of the ONU
        :param onu_id: (int) ONU id on that interface
        :param request: (bytes) raw OMCI request frame
        :return: (bytes) the reply, or None if the handler failed
        :raises MalformedRequestError: the request could not be decoded
        :raises UnsupportedMessageError: no handler for the message type
        """
        try:
            msg = parse_pkt(request)

        except DecodeError as e:
            log.warning('cannot-parse-omci-msg', intf_id=intf_id, onu_id=onu_id,
                        e=str(e))
            raise MalformedRequestError('Cannot parse omci msg') from e

        log.info('omci-run', intf_id=intf_id, onu_id=onu_id,
                 transaction_id=msg.transaction_id,
                 msg_type=msg_type_name(msg.message_type),
                 me_class=msg.entity_class, me_instance=msg.entity_id)

        key = OnuKey(intf_id, onu_id)
        self.store.get_or_create(key)

        handler = self._handlers.get(msg.message_type)
        if handler is None:
            log.info('ignore-omci-msg', intf_id=intf_id, onu_id=onu_id,
                     msg_type=msg.message_type)
            raise UnsupportedMessageError(msg.message_type)

        try:
            resp = bytearray(handler(msg.entity_class, msg.content, key))
            if len(resp) < OMCI_MIN_RESPONSE_LENGTH:
                raise ValueError('response body too short: {}'.format(
                    len(resp)))

        except Exception as e:
            # Best effort: a failing handler yields no reply, not an error
            log.exception('unable-to-send-successful-response',
                          intf_id=intf_id, onu_id=onu_id,
                          msg_type=msg_type_name(msg.message_type), e=e)
            return None

        resp[0:OMCI_HEADER_LENGTH] = raw(OmciResponseHeader(
            transaction_id=msg.transaction_id,
            message_type=OMCI_RESPONSE_FLAGS | msg.message_type,
            device_id=msg.device_id))

        if msg.message_type not in MIB_UPLOAD_MSG_TYPES:
            resp[OMCI_HEADER_LENGTH:_ATTRIBUTE_OFFSET] = raw(OmciResponseResult(
                entity_class=msg.entity_class,
                entity_id=msg.entity_id,
                success_code=ReasonCodes.Success))

            # Only the low nibble is compared, as the reference ONU does
            if (msg.message_type & 0x0F) == OmciMsgType.Get:
                attributes = simulated_get_attributes(msg.entity_class,
                                                      msg.content)
                if attributes is not None:
                    resp[_ATTRIBUTE_OFFSET:_ATTRIBUTE_OFFSET + len(attributes)] = \
                        attributes

        resp = bytes(resp)
        log.debug('omci-sim-response', intf_id=intf_id, onu_id=onu_id,
                  omci_msg=resp.hex())
        return resp
