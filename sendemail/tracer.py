# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from enum import IntEnum
from typing import Optional, TextIO

class TraceLevel(IntEnum):
    INFO = 0
    VERBOSE = 1

    def display_name(self) -> str:
        return self.name.capitalize()

    @staticmethod
    def from_str(s : Optional[str]) -> "TraceLevel":
        if s is None or s == '':
            return TraceLevel.INFO
        return TraceLevel[s.upper()]

# User-facing progress lines written to stdout. Distinct from the
# logging module which goes to stderr.
class Tracer:
    level : Optional[TraceLevel] = None

    def __init__(self, out : TextIO, level : Optional[TraceLevel] = None):
        self.out = out
        self.level = level

    def enabled(self, level : TraceLevel) -> bool:
        return self.level is not None and self.level >= level

    def __call__(self, level : TraceLevel, msg : str):
        if not self.enabled(level):
            return
        self.out.write('%7s: %s\n' % (level.display_name(), msg))

    def info(self, msg : str):
        self(TraceLevel.INFO, msg)

    def verbose(self, msg : str):
        self(TraceLevel.VERBOSE, msg)
