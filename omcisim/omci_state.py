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
import threading
from collections import namedtuple
from enum import IntEnum

import structlog

from omcisim.omci_defs import NotFoundError

log = structlog.get_logger()


OnuKey = namedtuple('OnuKey', ['intf_id', 'onu_id'])


class OnuLifecycleState(IntEnum):
    # TODO: Needs to reflect real ONU/OMCI state, nothing drives it to DONE yet
    INCOMPLETE = 0
    DONE = 1


class OnuOmciState(object):
    """Simulated OMCI management state of a single ONU"""

    def __init__(self):
        self.reset()

    def reset(self):
        self.gem_port_id = 0
        self.mib_upload_ctr = 0
        self.uni_g_instance = 1
        self.tcont_instance = 0
        self.pptp_instance = 1
        self.state = OnuLifecycleState.INCOMPLETE

    def __repr__(self):
        return ('OnuOmciState(gem_port_id={}, mib_upload_ctr={}, '
                'uni_g_instance={}, tcont_instance={}, pptp_instance={}, '
                'state={})').format(self.gem_port_id, self.mib_upload_ctr,
                                    self.uni_g_instance, self.tcont_instance,
                                    self.pptp_instance, self.state.name)


class OnuStateStore(object):
    """
    In-memory mapping of OnuKey -> OnuOmciState.

    Entries are created lazily on first contact and live as long as the
    store. Data is not persistent across restarts. The store is the only
    writer of per-ONU fields; every lookup-or-create and every mutation is
    serialized by a single lock so concurrent requests for the same ONU do
    not lose updates.
    """
    def __init__(self):
        self._data = dict()
        self._lock = threading.RLock()

    def __contains__(self, key):
        return self.exists(key)

    def __len__(self):
        with self._lock:
            return len(self._data)

    def exists(self, key):
        with self._lock:
            return key in self._data

    def keys(self):
        with self._lock:
            return list(self._data.keys())

    def get_or_create(self, key):
        """
        Get the state of an ONU, creating it with defaults on first use.
        Never resets an existing entry.

        :param key: (OnuKey) ONU identity
        :return: (OnuOmciState) the stored state, by reference
        """
        with self._lock:
            state = self._data.get(key)
            if state is None:
                log.debug('onu-omci-state-created', intf_id=key.intf_id,
                          onu_id=key.onu_id)
                state = OnuOmciState()
                self._data[key] = state
            return state

    def get_lifecycle_state(self, intf_id, onu_id):
        """Lifecycle state of an ONU, INCOMPLETE if it was never seen"""
        with self._lock:
            state = self._data.get(OnuKey(intf_id, onu_id))
            if state is None:
                return OnuLifecycleState.INCOMPLETE
            return state.state

    def get_gem_port_id(self, intf_id, onu_id):
        """
        GEM port id recorded for an ONU

        :raises NotFoundError: if the ONU was never seen
        """
        with self._lock:
            state = self._data.get(OnuKey(intf_id, onu_id))
            if state is None:
                raise NotFoundError(
                    'Failed to find a key in OnuOmciStateMap '
                    'key{{intfid:{}, onuid:{}}}'.format(intf_id, onu_id))
            return state.gem_port_id

    def set_gem_port_id(self, key, gem_port_id):
        with self._lock:
            self._entry(key).gem_port_id = gem_port_id

    def next_mib_upload(self, key):
        """Advance the MIB upload counter, returning its new value"""
        with self._lock:
            state = self._entry(key)
            state.mib_upload_ctr += 1
            return state.mib_upload_ctr

    def reset(self, key):
        """Restore the defaults of an existing entry in place"""
        with self._lock:
            self._entry(key).reset()
            log.debug('onu-omci-state-reset', intf_id=key.intf_id,
                      onu_id=key.onu_id)

    def clear(self):
        with self._lock:
            self._data.clear()

    def _entry(self, key):
        try:
            return self._data[key]
        except KeyError:
            raise NotFoundError('No OMCI state for ONU {}'.format(key))
