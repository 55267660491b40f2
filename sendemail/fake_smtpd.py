# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Dict, List, Optional
import logging

from aiosmtpd.controller import Controller
from aiosmtpd.smtp import AuthResult, LoginPassword

class InMemoryHandler:
    ehlo : Optional[str] = None
    mail_from : Optional[str] = None
    rcpt_to : List[str]
    data : Optional[bytes] = None

    def __init__(self):
        self.rcpt_to = []

    def __repr__(self):
        out = ''
        if self.ehlo:
            out += 'ehlo ' + self.ehlo + '\n'
        if self.mail_from:
            out += 'mail_from ' + self.mail_from + '\n'
        if self.rcpt_to:
            out += 'rcpt_to ' + str(self.rcpt_to) + '\n'
        if self.data:
            out += 'data ' + self.data.decode('utf-8') + '\n'
        return out

    async def handle_EHLO(self, server, session, envelope, hostname, responses
                          ) -> List[str]:
        logging.debug('InMemoryHandler.handle_EHLO %s', hostname)
        self.ehlo = hostname
        session.host_name = hostname
        return responses

    async def handle_MAIL(self, server, session, envelope, address, options
                          ) -> str:
        logging.debug('InMemoryHandler.handle_MAIL %s %s', address, options)
        self.mail_from = address
        envelope.mail_from = address
        envelope.mail_options.extend(options)
        return '250 OK'

    async def handle_RCPT(self, server, session, envelope, address, options
                          ) -> str:
        logging.debug('InMemoryHandler.handle_RCPT %s %s', address, options)
        self.rcpt_to.append(address)
        if address.startswith('rcptperm'):
            return '550 rcpt perm'
        envelope.rcpt_tos.append(address)
        return '250 OK'

    async def handle_DATA(self, server, session, envelope) -> str:
        logging.debug('InMemoryHandler.handle_DATA %d bytes',
                      len(envelope.content))
        self.data = envelope.content
        return '250 Message accepted for delivery'

# {username: password}
class Authenticator:
    logins : List[str]

    def __init__(self, users : Dict[str, str]):
        self.users = users
        self.logins = []

    def __call__(self, server, session, envelope, mechanism, auth_data):
        fail_nothandled = AuthResult(success=False, handled=False)
        if mechanism not in ('LOGIN', 'PLAIN'):
            return fail_nothandled
        if not isinstance(auth_data, LoginPassword):
            return fail_nothandled
        user = auth_data.login.decode('utf-8')
        if self.users.get(user, None) != auth_data.password.decode('utf-8'):
            logging.debug('Authenticator: auth fail %s', user)
            return fail_nothandled
        self.logins.append(user)
        return AuthResult(success=True)

# Plaintext smtp server (no STARTTLS) on a background thread.
class FakeSmtpd:
    handler : InMemoryHandler
    authenticator : Optional[Authenticator] = None

    def __init__(self, host : str, port : int,
                 users : Optional[Dict[str, str]] = None):
        self.handler = InMemoryHandler()
        kwargs = {}
        if users is not None:
            self.authenticator = Authenticator(users)
            kwargs['authenticator'] = self.authenticator
            kwargs['auth_require_tls'] = False
        self.controller = Controller(
            self.handler, hostname=host, port=port, **kwargs)

    def start(self):
        self.controller.start()
    def stop(self):
        self.controller.stop()
