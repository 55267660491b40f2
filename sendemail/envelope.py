# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List, Optional
import logging
import secrets

import email.message
import email.utils
from email import policy
from email.headerregistry import Address

class Envelope:
    sender : str
    body : str
    subject : Optional[str] = None
    to : List[str]
    cc : List[str]
    bcc : List[str]

    def __init__(self, sender : str, body : str,
                 subject : Optional[str] = None):
        self.sender = sender
        self.body = body
        self.subject = subject
        self.to = []
        self.cc = []
        self.bcc = []

    def __repr__(self):
        return 'from=%s to=%s cc=%s bcc=%s subject=%s body len=%d' % (
            self.sender, self.to, self.cc, self.bcc, self.subject,
            len(self.body))

    # order preserved, duplicates kept
    def recipients(self) -> List[str]:
        return self.to + self.cc + self.bcc

    # Address() raises on malformed addresses, this is not caught.
    # Bcc is carried only in the smtp envelope, never as a header.
    def to_email_message(self, msgid_domain : Optional[str] = None
                         ) -> email.message.EmailMessage:
        m = email.message.EmailMessage(policy=policy.SMTP)
        m['From'] = Address(addr_spec=self.sender)
        if self.to:
            m['To'] = [Address(addr_spec=t) for t in self.to]
        if self.cc:
            m['Cc'] = [Address(addr_spec=c) for c in self.cc]
        for b in self.bcc:
            Address(addr_spec=b)
        if self.subject is not None:
            m['Subject'] = self.subject
        m.add_header(
            'Date', email.utils.format_datetime(email.utils.localtime()))
        if msgid_domain is None:
            msgid_domain = self.sender.rsplit('@', 1)[-1]
        m.add_header(
            'Message-ID', '<' + secrets.token_hex(16) + '@' + msgid_domain + '>')
        m.set_content(self.body)
        logging.debug('Envelope.to_email_message %s', self)
        return m
