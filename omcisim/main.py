#!/usr/bin/env python
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
OMCI simulator process: answers OMCI requests on behalf of simulated ONUs
received over UDP, so an OLT control plane can be exercised without real
hardware.
"""
import argparse
import os

import yaml

from omcisim.omci_server import OmciSimServer
from omcisim.omci_sim import OmciSim
from omcisim.structlog_setup import setup_logging

defs = dict(
    config=os.environ.get('CONFIG', './omcisim.yml'),
    host=os.environ.get('HOST', None),
    port=os.environ.get('PORT', None),
    instance_id=os.environ.get('INSTANCE_ID', os.environ.get('HOSTNAME', '1')),
)


def load_config(args):
    path = args.config
    if path.startswith('.'):
        dir = os.path.dirname(os.path.abspath(__file__))
        path = os.path.join(dir, path)
    path = os.path.abspath(path)
    with open(path) as fd:
        config = yaml.safe_load(fd)
    return config or dict()


banner = r'''
  ___  __  __  ___ ___   ___ ___ __  __
 / _ \|  \/  |/ __|_ _| / __|_ _|  \/  |
| (_) | |\/| | (__ | |  \__ \| || |\/| |
 \___/|_|  |_|\___|___| |___/___|_|  |_|
'''


def print_banner(log):
    for line in banner.strip('\n').splitlines():
        log.info(line)
    log.info('(to stop: press Ctrl-C)')


def parse_args(argv=None):

    parser = argparse.ArgumentParser()

    _help = ('Path to omcisim.yml config file (default: %s). '
             'If relative, it is relative to main.py of omcisim.'
             % defs['config'])
    parser.add_argument('-c', '--config',
                        dest='config',
                        action='store',
                        default=defs['config'],
                        help=_help)

    _help = ('<hostname> or <ip> the UDP service binds to (default: '
             'server.host of the config file)')
    parser.add_argument('-H', '--host',
                        dest='host',
                        action='store',
                        default=defs['host'],
                        help=_help)

    _help = ('port number of the UDP service (default: server.port of the '
             'config file)')
    parser.add_argument('-p', '--port',
                        dest='port',
                        action='store',
                        type=int,
                        default=defs['port'],
                        help=_help)

    _help = ('unique string id of this simulator instance (default: %s)'
             % defs['instance_id'])
    parser.add_argument('-i', '--instance-id',
                        dest='instance_id',
                        action='store',
                        default=defs['instance_id'],
                        help=_help)

    _help = 'omit startup banner log lines'
    parser.add_argument('-n', '--no-banner',
                        dest='no_banner',
                        action='store_true',
                        default=False,
                        help=_help)

    _help = "suppress debug and info logs"
    parser.add_argument('-q', '--quiet',
                        dest='quiet',
                        action='count',
                        help=_help)

    _help = 'enable verbose logging'
    parser.add_argument('-v', '--verbose',
                        dest='verbose',
                        action='count',
                        help=_help)

    args = parser.parse_args(argv)

    return args


class Main(object):

    def __init__(self, argv=None):

        self.args = args = parse_args(argv)
        self.config = load_config(args)

        verbosity_adjust = (args.verbose or 0) - (args.quiet or 0)
        self.log = setup_logging(self.config.get('logging', {'version': 1}),
                                 args.instance_id,
                                 verbosity_adjust=verbosity_adjust)

        server_config = self.config.get('server', {})
        self.host = args.host if args.host is not None \
            else server_config.get('host', '')
        self.port = int(args.port if args.port is not None
                        else server_config.get('port', 0))

        # components
        self.omci_sim = None
        self.server = None

        if not args.no_banner:
            print_banner(self.log)

        self.startup_components()

    def start(self):
        self.start_reactor()  # will not return except Keyboard interrupt

    def startup_components(self):
        try:
            self.log.info('starting-internal-components')
            self.omci_sim = OmciSim()
            self.server = OmciSimServer(self.omci_sim, self.port,
                                        host=self.host).start()
            self.log.info('started-internal-services')

        except Exception as e:
            self.log.exception('startup-failed', e=e)
            raise

    def shutdown_components(self):
        """Execute before the reactor is shut down"""
        self.log.info('exiting-on-keyboard-interrupt')
        if self.server is not None:
            return self.server.stop()

    def start_reactor(self):
        from twisted.internet import reactor
        reactor.callWhenRunning(
            lambda: self.log.info('twisted-reactor-started'))
        reactor.addSystemEventTrigger('before', 'shutdown',
                                      self.shutdown_components)
        reactor.run()


def main():
    Main().start()


if __name__ == '__main__':
    main()
