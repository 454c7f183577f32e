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
OMCI request handlers.

Every handler variant is called as handler(entity_class, content, key) and
returns the reply buffer for the request. The dispatch engine fills in the
common header afterwards, so most variants just hand back an empty frame.
"""
import struct

import structlog

from omcisim.omci_defs import OmciClass, OmciMsgType, ReasonCodes, \
    OmciHandlerError, OmciNullPointer
from omcisim.omci_frame import build_response, OmciMibResetResponse, \
    OmciMibUploadResponse, OmciMibUploadNextResponse

log = structlog.get_logger()


class OmciHandler(object):
    """Generic variant: empty reply body, completed by the engine"""

    def __init__(self, store):
        self._store = store

    def __call__(self, entity_class, content, key):
        return build_response()


class CreateHandler(OmciHandler):

    def __call__(self, entity_class, content, key):
        if entity_class == OmciClass.GemPortNetworkCtp:
            # Port-ID is the first set-by-create attribute
            gem_port_id, = struct.unpack_from('>H', content)
            if gem_port_id == OmciNullPointer:
                raise OmciHandlerError(
                    'GEM port network CTP create without a Port-ID')

            log.debug('gem-port-created', intf_id=key.intf_id,
                      onu_id=key.onu_id, gem_port_id=gem_port_id)
            self._store.set_gem_port_id(key, gem_port_id)

        return build_response()


class MibResetHandler(OmciHandler):

    def __call__(self, entity_class, content, key):
        log.debug('mib-reset', intf_id=key.intf_id, onu_id=key.onu_id)
        self._store.reset(key)

        return build_response(OmciMibResetResponse(
            entity_class=OmciClass.OntData,
            entity_id=0,
            success_code=ReasonCodes.Success))


class MibUploadHandler(OmciHandler):
    # No MIB content is simulated, so there is nothing to upload
    number_of_commands = 0

    def __call__(self, entity_class, content, key):
        return build_response(OmciMibUploadResponse(
            entity_class=OmciClass.OntData,
            entity_id=0,
            number_of_commands=self.number_of_commands))


class MibUploadNextHandler(OmciHandler):

    def __call__(self, entity_class, content, key):
        ctr = self._store.next_mib_upload(key)
        log.debug('mib-upload-next', intf_id=key.intf_id, onu_id=key.onu_id,
                  mib_upload_ctr=ctr)

        return build_response(OmciMibUploadNextResponse(
            entity_class=OmciClass.OntData,
            entity_id=0))


HANDLER_VARIANTS = {
    OmciMsgType.Create: CreateHandler,
    OmciMsgType.MibReset: MibResetHandler,
    OmciMsgType.MibUpload: MibUploadHandler,
    OmciMsgType.MibUploadNext: MibUploadNextHandler,
}


def default_handlers(store):
    """
    Build the message type -> handler table for every known message type

    :param store: (OnuStateStore) state the handlers act on
    :return: (dict) message type code -> handler
    """
    return {msg_type: HANDLER_VARIANTS.get(msg_type, OmciHandler)(store)
            for msg_type in OmciMsgType}
