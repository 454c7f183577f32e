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
UDP front end for the OMCI simulator.

Each datagram carries the 4 byte PON interface id and 4 byte ONU id
(big-endian) followed by one OMCI frame. The reply echoes the same 8 byte
prefix followed by the simulated OMCI response. Requests that produce no
response are dropped.
"""
import struct

import structlog
from twisted.internet.defer import inlineCallbacks
from twisted.internet.protocol import DatagramProtocol

from omcisim.omci_defs import OmciError

log = structlog.get_logger()

ONU_ADDRESS_FORMAT = '>II'
ONU_ADDRESS_LENGTH = struct.calcsize(ONU_ADDRESS_FORMAT)


class OmciSimProtocol(DatagramProtocol):

    def __init__(self, omci_sim):
        self.omci_sim = omci_sim
        self.rx_frames = 0
        self.tx_frames = 0
        self.dropped_frames = 0

    def datagramReceived(self, datagram, addr):
        self.rx_frames += 1

        if len(datagram) < ONU_ADDRESS_LENGTH:
            log.warning('datagram-too-short', length=len(datagram), addr=addr)
            self.dropped_frames += 1
            return

        intf_id, onu_id = struct.unpack_from(ONU_ADDRESS_FORMAT, datagram)
        try:
            response = self.omci_sim.handle(intf_id, onu_id,
                                            datagram[ONU_ADDRESS_LENGTH:])
        except OmciError as e:
            log.info('omci-request-dropped', intf_id=intf_id, onu_id=onu_id,
                     addr=addr, reason=str(e))
            self.dropped_frames += 1
            return

        if response is None:
            self.dropped_frames += 1
            return

        self.transport.write(datagram[:ONU_ADDRESS_LENGTH] + response, addr)
        self.tx_frames += 1


class OmciSimServer(object):

    def __init__(self, omci_sim, port, host=''):
        self.omci_sim = omci_sim
        self.port = port
        self.host = host
        self.protocol = None
        self.listening_port = None

    def start(self, reactor=None):
        if reactor is None:
            from twisted.internet import reactor
        log.debug('starting', host=self.host, port=self.port)
        self.protocol = OmciSimProtocol(self.omci_sim)
        self.listening_port = reactor.listenUDP(self.port, self.protocol,
                                                interface=self.host)
        log.info('started', port=self.listening_port.getHost().port)
        return self

    @inlineCallbacks
    def stop(self):
        log.debug('stopping')
        if self.listening_port is not None:
            yield self.listening_port.stopListening()
            self.listening_port = None
        log.info('stopped', onus=len(self.omci_sim.store),
                 rx_frames=self.protocol.rx_frames if self.protocol else 0,
                 tx_frames=self.protocol.tx_frames if self.protocol else 0)
        return self
