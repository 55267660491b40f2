# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Optional

from email import _header_value_parser
from email.errors import HeaderParseError

# bare addr-spec only (local@domain), no display name or angle brackets
def parse_addr_spec(addr : str):
    try:
        spec, rest = _header_value_parser.get_addr_spec(addr)
    except (HeaderParseError, IndexError):
        return None
    if rest or spec.all_defects:
        return None
    if not spec.local_part or not spec.domain:
        return None
    return spec

def is_email_address(addr : Optional[str]) -> bool:
    if not addr:
        return False
    return parse_addr_spec(addr.strip()) is not None
