# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Callable, List, Optional, Tuple
import logging

from sendemail.envelope import Envelope
from sendemail.transport import Transport, TransportConfig

SendExpectation = Callable[[TransportConfig, Envelope], None]

# Records every send; an optional expectation may raise to simulate
# transport failures.
class FakeTransport(Transport):
    sent : List[Tuple[TransportConfig, Envelope]]
    expectation : Optional[SendExpectation] = None

    def __init__(self, expectation : Optional[SendExpectation] = None):
        self.sent = []
        self.expectation = expectation

    def send(self, config : TransportConfig, envelope : Envelope):
        logging.debug('FakeTransport.send %s %s', config, envelope)
        self.sent.append((config, envelope))
        if self.expectation is not None:
            self.expectation(config, envelope)
