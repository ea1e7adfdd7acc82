# Copyright 2018-2021 The glTF-Blender-IO authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

#
# Imports
#

import logging
import logging.handlers


class WarningKind:
    """Categories of problems the importer recovers from."""
    Reference = 'REFERENCE'      # index out of range or accessor of the wrong type
    Shape = 'SHAPE'              # wrong array arity or mismatched parallel arrays
    Topology = 'TOPOLOGY'        # cycle in the node or joint graph
    Unsupported = 'UNSUPPORTED'  # extension or primitive mode not handled


class Log:
    def __init__(self, loglevel):
        self.logger = logging.getLogger('glTFImporter')

        # For console display
        self.console_handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
        self.console_handler.setFormatter(formatter)

        # Structured batch handed back to the caller. It is never attached to
        # the logger, so it records warnings whatever the console level is.
        self.popup_handler = logging.handlers.MemoryHandler(1024*10)

        self.logger.addHandler(self.console_handler)

        self.logger.setLevel(int(loglevel))

    def error(self, message, popup=False):
        self.logger.error(message)
        if popup:
            self.popup_handler.buffer.append(('ERROR', None, message))

    def warning(self, message, kind=WarningKind.Reference):
        self.logger.warning(message)
        self.popup_handler.buffer.append(('WARNING', kind, message))

    def info(self, message, popup=False):
        self.logger.info(message)
        if popup:
            self.popup_handler.buffer.append(('INFO', None, message))

    def debug(self, message):
        self.logger.debug(message)

    def messages(self):
        return self.popup_handler.buffer

    def flush(self):
        self.logger.removeHandler(self.console_handler)
        self.popup_handler.flush()
        self.logger.removeHandler(self.popup_handler)
