#   Copyright 2019 AUI, Inc. Washington DC, USA
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

from collections import namedtuple

ChangeEpoch = namedtuple('ChangeEpoch', ['source_epoch', 'plane_epoch'])
ChangeEpoch.__doc__ = """
Immutable snapshot of the change counters. source_epoch advances when the chunk source produced
new data, plane_epoch when the fitted plane changed. Consumers keep a snapshot and compare it
with a later one to decide whether derived products have to be recomputed.
"""


class EpochTracker:
    """
    Owner of the two monotonically increasing change counters.
    """

    def __init__(self, source_epoch=0, plane_epoch=0):
        self._source_epoch = int(source_epoch)
        self._plane_epoch = int(plane_epoch)

    def notify_source_changed(self):
        self._source_epoch = self._source_epoch + 1

    def notify_plane_changed(self):
        self._plane_epoch = self._plane_epoch + 1

    def snapshot(self):
        return ChangeEpoch(self._source_epoch, self._plane_epoch)

    def copy(self):
        return EpochTracker(self._source_epoch, self._plane_epoch)
