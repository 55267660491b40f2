# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List, Optional, Sequence, Tuple, Union
import argparse
import logging

from sendemail.address import is_email_address
from sendemail.config import Config
from sendemail.tracer import TraceLevel

VERSION = '1.0.0'
PROG = 'sendemail'

DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 25

class FieldError:
    field : str
    message : str

    def __init__(self, field : str, message : str):
        self.field = field
        self.message = message

    def __str__(self):
        return self.message

    def __repr__(self):
        return '%s: %s' % (self.field, self.message)

    def __eq__(self, rhs):
        if not isinstance(rhs, FieldError):
            return False
        return self.field == rhs.field and self.message == rhs.message


class Options:
    sender : str
    to : Tuple[str, ...]
    cc : Tuple[str, ...]
    bcc : Tuple[str, ...]
    subject : Optional[str] = None
    message : Optional[str] = None
    host : str = DEFAULT_HOST
    port : int = DEFAULT_PORT
    username : Optional[str] = None
    password : Optional[str] = None
    trace : Optional[TraceLevel] = None
    disable_ssl : bool = False
    timeout : Optional[float] = None
    ehlo_hostname : Optional[str] = None

    def __init__(self, sender : str,
                 to : Sequence[str] = (),
                 cc : Sequence[str] = (),
                 bcc : Sequence[str] = (),
                 subject : Optional[str] = None,
                 message : Optional[str] = None,
                 host : str = DEFAULT_HOST,
                 port : int = DEFAULT_PORT,
                 username : Optional[str] = None,
                 password : Optional[str] = None,
                 trace : Optional[TraceLevel] = None,
                 disable_ssl : bool = False,
                 timeout : Optional[float] = None,
                 ehlo_hostname : Optional[str] = None):
        self.sender = sender
        self.to = tuple(to)
        self.cc = tuple(cc)
        self.bcc = tuple(bcc)
        self.subject = subject
        self.message = message
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.trace = trace
        self.disable_ssl = disable_ssl
        self.timeout = timeout
        self.ehlo_hostname = ehlo_hostname

    def __repr__(self):
        # no password
        return ('Options(from=%s to=%s cc=%s bcc=%s host=%s:%d '
                'username=%s trace=%s disable_ssl=%s)' % (
                    self.sender, list(self.to), list(self.cc),
                    list(self.bcc), self.host, self.port, self.username,
                    self.trace, self.disable_ssl))

    def receiver_count(self) -> int:
        return len(self.to) + len(self.cc) + len(self.bcc)


def new_parser() -> argparse.ArgumentParser:
    # -h is the smtp host so argparse's builtin -h/--help is replaced
    # with -?/--help
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='A simple command line SMTP email client',
        add_help=False)
    parser.add_argument('-f', '--from', dest='sender', metavar='ADDRESS',
                        help='The email address of the sender. Required')
    parser.add_argument('-t', '--to', action='append', default=[],
                        metavar='ADDRESS',
                        help='The email address of the receiver(s)')
    parser.add_argument('--cc', action='append', default=[],
                        metavar='ADDRESS',
                        help='The email address of the cc receiver(s)')
    parser.add_argument('--bcc', action='append', default=[],
                        metavar='ADDRESS',
                        help='The email address of the bcc receiver(s)')
    parser.add_argument('-s', '--subject', help='Message subject')
    parser.add_argument('-m', '--message',
                        help='Message body. STDIN could be used instead')
    parser.add_argument('-h', '--host',
                        help='SMTP client host, default is %s' % DEFAULT_HOST)
    parser.add_argument('-p', '--port', type=int,
                        help='SMTP client port, default is %d' % DEFAULT_PORT)
    parser.add_argument('-xu', '--username',
                        help='Username to use for authentication, '
                        'like an email address')
    parser.add_argument('-xp', '--password',
                        help='Password to use for authentication')
    parser.add_argument('-T', '--trace', nargs='?', const='info',
                        type=str.lower, choices=['info', 'verbose'],
                        help='See trace messages. --trace will display info '
                        'level messages. --trace:verbose will display '
                        'verbose and info level messages')
    parser.add_argument('--disable-ssl', action='store_true', default=None,
                        help='Specify the SMTP email client should not use '
                        'Secure Sockets Layer (SSL) to encrypt the '
                        'connection')
    parser.add_argument('--enable-ssl', dest='disable_ssl',
                        action='store_false', default=None,
                        help='Use STARTTLS even if the config file sets '
                        'disable_ssl')
    parser.add_argument('--timeout', type=float, metavar='SECONDS',
                        help='SMTP connection timeout, default is to wait '
                        'indefinitely')
    parser.add_argument('--ehlo', dest='ehlo_hostname', metavar='HOSTNAME',
                        help='Hostname to send in EHLO, default is the '
                        'local fqdn')
    parser.add_argument('--config', metavar='PATH',
                        help='YAML file supplying smtp defaults and logging '
                        'configuration')
    parser.add_argument('-?', '--help', action='help',
                        help='Show help information')
    parser.add_argument('--version', action='version',
                        version='%(prog)s ' + VERSION,
                        help='Show version information')
    return parser

# Rewrite option:value to option=value for options this parser
# knows (--trace:verbose, -T:verbose, --port:587).
def normalize_argv(parser : argparse.ArgumentParser,
                   argv : Sequence[str]) -> List[str]:
    out = []
    for i, arg in enumerate(argv):
        if arg == '--':
            out.extend(argv[i:])
            break
        if arg.startswith('-') and ':' in arg:
            opt, value = arg.split(':', 1)
            if '=' not in opt and opt in parser._option_string_actions:
                arg = opt + '=' + value
        out.append(arg)
    return out

def parse_args(parser : argparse.ArgumentParser,
               argv : Sequence[str]) -> argparse.Namespace:
    return parser.parse_args(normalize_argv(parser, argv))


def _check_addresses(field : str, addrs : Sequence[str],
                     errors : List[FieldError]):
    for addr in addrs:
        if not is_email_address(addr):
            errors.append(FieldError(
                field, 'The --%s field is not a valid e-mail address: %s' % (
                    field, addr)))

# config file values arrive as whatever type yaml produced
def _check_str(field : str, value, errors : List[FieldError]):
    if value is not None and not isinstance(value, str):
        errors.append(FieldError(
            field, 'The %s setting must be a string: %r' % (field, value)))

def validate(args : argparse.Namespace,
             config : Optional[Config] = None
             ) -> Union[Options, List[FieldError]]:
    if config is None:
        config = Config()
    errors : List[FieldError] = []

    def pick(name, config_key, default):
        if (value := getattr(args, name, None)) is not None:
            return value
        return config.smtp(config_key, default)

    if not args.sender:
        errors.append(FieldError('from', 'The --from field is required.'))
    else:
        _check_addresses('from', [args.sender], errors)
    _check_addresses('to', args.to, errors)
    _check_addresses('cc', args.cc, errors)
    _check_addresses('bcc', args.bcc, errors)

    port = pick('port', 'port', DEFAULT_PORT)
    try:
        port = int(port)
    except (TypeError, ValueError):
        errors.append(FieldError('port', 'The --port field must be an '
                                 'integer: %s' % port))
    else:
        if port < 1 or port > 65535:
            errors.append(FieldError(
                'port', 'The --port field must be between 1 and 65535: %d'
                % port))

    host = pick('host', 'host', DEFAULT_HOST)
    username = pick('username', 'username', None)
    password = pick('password', 'password', None)
    ehlo_hostname = pick('ehlo_hostname', 'ehlo', None)
    _check_str('host', host, errors)
    _check_str('username', username, errors)
    _check_str('password', password, errors)
    _check_str('ehlo', ehlo_hostname, errors)
    disable_ssl = pick('disable_ssl', 'disable_ssl', False)
    if not isinstance(disable_ssl, bool):
        errors.append(FieldError(
            'disable_ssl', 'The disable_ssl setting must be true or false: '
            '%s' % disable_ssl))

    timeout = pick('timeout', 'timeout', None)
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            errors.append(FieldError(
                'timeout', 'The --timeout field must be a number: %s' %
                timeout))
        else:
            if timeout <= 0:
                errors.append(FieldError(
                    'timeout', 'The --timeout field must be positive: %s' %
                    timeout))

    if errors:
        logging.debug('validate %s', errors)
        return errors

    trace = None
    if args.trace is not None:
        trace = TraceLevel.from_str(args.trace)

    return Options(
        sender=args.sender,
        to=args.to,
        cc=args.cc,
        bcc=args.bcc,
        subject=args.subject,
        message=args.message,
        host=host,
        port=port,
        username=username,
        password=password,
        trace=trace,
        disable_ssl=disable_ssl,
        timeout=timeout,
        ehlo_hostname=ehlo_hostname)
