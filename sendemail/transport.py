# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from abc import ABC, abstractmethod
from smtplib import (
    SMTP,
    SMTPDataError,
    SMTPRecipientsRefused,
    SMTPSenderRefused )
from typing import Optional
import logging
import ssl

from sendemail.envelope import Envelope

class Credentials:
    username : str
    password : str

    def __init__(self, username : str, password : Optional[str] = None):
        self.username = username
        self.password = password if password is not None else ''

    def __repr__(self):
        return 'Credentials(%s)' % self.username

    def __eq__(self, rhs):
        if not isinstance(rhs, Credentials):
            return False
        return (self.username == rhs.username and
                self.password == rhs.password)


class TransportConfig:
    host : str
    port : int
    enable_tls : bool = True
    credentials : Optional[Credentials] = None
    # None: block indefinitely
    timeout : Optional[float] = None
    ehlo_hostname : Optional[str] = None
    # None: ssl.create_default_context(), verifies the server certificate
    # and hostname
    tls_context : Optional[ssl.SSLContext] = None

    def __init__(self, host : str, port : int,
                 enable_tls : bool = True,
                 credentials : Optional[Credentials] = None,
                 timeout : Optional[float] = None,
                 ehlo_hostname : Optional[str] = None,
                 tls_context : Optional[ssl.SSLContext] = None):
        self.host = host
        self.port = port
        self.enable_tls = enable_tls
        self.credentials = credentials
        self.timeout = timeout
        self.ehlo_hostname = ehlo_hostname
        self.tls_context = tls_context

    def __str__(self):
        return '%s:%d tls=%s credentials=%s' % (
            self.host, self.port, self.enable_tls, self.credentials)

    def __repr__(self):
        return str(self)


class Transport(ABC):
    # Blocks until the message is accepted or raises.
    @abstractmethod
    def send(self, config : TransportConfig, envelope : Envelope):
        raise NotImplementedError()


class SmtpTransport(Transport):
    def _smtp(self, config : TransportConfig) -> SMTP:
        kwargs = {}
        if config.timeout is not None:
            kwargs['timeout'] = config.timeout
        if config.ehlo_hostname is not None:
            kwargs['local_hostname'] = config.ehlo_hostname
        return SMTP(**kwargs)

    # All or nothing: if the server refuses any recipient, the
    # transaction is reset before DATA and SMTPRecipientsRefused is
    # raised with {rcpt: (code, resp)} for the refused ones.
    def send(self, config : TransportConfig, envelope : Envelope):
        msg = envelope.to_email_message(config.ehlo_hostname)
        with self._smtp(config) as smtp:
            logging.info('SmtpTransport connect %s:%d',
                         config.host, config.port)
            code, resp = smtp.connect(config.host, config.port)
            logging.debug('SmtpTransport greeting %d %s', code, resp)
            smtp.ehlo()
            logging.debug('SmtpTransport esmtp %s', smtp.esmtp_features)

            if config.enable_tls:
                context = config.tls_context
                if context is None:
                    context = ssl.create_default_context()
                # raises SMTPNotSupportedError if the server doesn't
                # advertise starttls
                code, resp = smtp.starttls(context=context)
                logging.debug('SmtpTransport starttls %d %s', code, resp)
                smtp.ehlo()

            if config.credentials is not None:
                logging.debug('SmtpTransport login %s',
                              config.credentials.username)
                smtp.login(config.credentials.username,
                           config.credentials.password)

            code, resp = smtp.mail(envelope.sender)
            logging.debug('SmtpTransport mail resp %d %s', code, resp)
            if code != 250:
                smtp.rset()
                raise SMTPSenderRefused(code, resp, envelope.sender)

            refused = {}
            for rcpt in envelope.recipients():
                code, resp = smtp.rcpt(rcpt)
                logging.debug('SmtpTransport rcpt %s resp %d %s',
                              rcpt, code, resp)
                if code not in (250, 251):
                    refused[rcpt] = (code, resp)
            if refused:
                logging.info('SmtpTransport refused %s', refused)
                smtp.rset()
                raise SMTPRecipientsRefused(refused)

            code, resp = smtp.data(msg.as_bytes())
            logging.info('SmtpTransport data resp %d %s', code, resp)
            if code != 250:
                smtp.rset()
                raise SMTPDataError(code, resp)
