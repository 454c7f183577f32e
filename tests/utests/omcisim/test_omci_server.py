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
import struct
from unittest import TestCase, main

from mock import Mock
from scapy.compat import raw

from omcisim.omci_defs import OmciClass, OmciMsgType, OMCI_FRAME_LENGTH
from omcisim.omci_frame import OmciRequestFrame
from omcisim.omci_server import OmciSimProtocol, OmciSimServer
from omcisim.omci_sim import OmciSim
from omcisim.omci_state import OnuKey

ADDR = ('127.0.0.1', 40000)


class FakeTransport(object):

    def __init__(self):
        self.written = []

    def write(self, packet, addr=None):
        self.written.append((packet, addr))


def datagram(intf_id, onu_id, message_type, entity_class=OmciClass.OntG,
             transaction_id=0x0102):
    return struct.pack('>II', intf_id, onu_id) + raw(OmciRequestFrame(
        transaction_id=transaction_id,
        message_type=0x40 | message_type,
        entity_class=entity_class,
        entity_id=0))


class TestOmciSimProtocol(TestCase):

    def setUp(self):
        self.sim = OmciSim()
        self.protocol = OmciSimProtocol(self.sim)
        self.transport = FakeTransport()
        self.protocol.transport = self.transport

    def test_reply_echoes_onu_address(self):
        self.protocol.datagramReceived(datagram(1, 2, OmciMsgType.Get, 0x82), ADDR)

        self.assertEqual(len(self.transport.written), 1)
        packet, addr = self.transport.written[0]
        self.assertEqual(addr, ADDR)
        self.assertEqual(len(packet), 8 + OMCI_FRAME_LENGTH)
        self.assertEqual(packet[:8], b'\x00\x00\x00\x01\x00\x00\x00\x02')
        self.assertEqual(packet[8:12], b'\x01\x02\x29\x0a')
        self.assertEqual(packet[17:19], b'\x00\x78')
        self.assertIn(OnuKey(1, 2), self.sim.store)
        self.assertEqual(self.protocol.tx_frames, 1)

    def test_short_datagram_is_dropped(self):
        self.protocol.datagramReceived(b'\x00\x01', ADDR)
        self.assertEqual(self.transport.written, [])
        self.assertEqual(self.protocol.dropped_frames, 1)

    def test_malformed_frame_is_dropped(self):
        self.protocol.datagramReceived(datagram(0, 1, OmciMsgType.Get)[:20], ADDR)
        self.assertEqual(self.transport.written, [])
        self.assertEqual(len(self.sim.store), 0)

    def test_unsupported_type_is_dropped(self):
        self.protocol.datagramReceived(datagram(0, 1, 3), ADDR)
        self.assertEqual(self.transport.written, [])
        self.assertEqual(self.protocol.dropped_frames, 1)

    def test_handler_body_of_wrong_type_is_dropped(self):
        self.sim.register(OmciMsgType.Set, lambda cls, content, key: 'x' * 40)
        self.protocol.datagramReceived(datagram(0, 1, OmciMsgType.Set), ADDR)
        self.assertEqual(self.transport.written, [])
        self.assertEqual(self.protocol.dropped_frames, 1)

    def test_handler_failure_is_dropped(self):
        self.sim.register(OmciMsgType.Set, Mock(side_effect=ValueError('boom')))
        self.protocol.datagramReceived(datagram(0, 1, OmciMsgType.Set), ADDR)
        self.assertEqual(self.transport.written, [])
        self.assertEqual(self.protocol.rx_frames, 1)
        self.assertEqual(self.protocol.dropped_frames, 1)


class TestOmciSimServer(TestCase):

    def test_start_and_stop(self):
        reactor = Mock()
        reactor.listenUDP.return_value.getHost.return_value.port = 50070
        sim = OmciSim()

        server = OmciSimServer(sim, 50070, host='127.0.0.1')
        self.assertIs(server.start(reactor=reactor), server)

        reactor.listenUDP.assert_called_once_with(50070, server.protocol,
                                                  interface='127.0.0.1')
        self.assertIs(server.protocol.omci_sim, sim)

        listening_port = server.listening_port
        d = server.stop()
        self.assertTrue(d.called)
        listening_port.stopListening.assert_called_once_with()
        self.assertIsNone(server.listening_port)


if __name__ == '__main__':
    main()
