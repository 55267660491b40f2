# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Callable, List, Optional, TextIO
import logging
import sys

from sendemail.config import Config
from sendemail.envelope import Envelope
from sendemail.options import (
    Options,
    new_parser,
    parse_args,
    validate )
from sendemail.tracer import Tracer
from sendemail.transport import (
    Credentials,
    SmtpTransport,
    Transport,
    TransportConfig )

def _usage(stdout : TextIO, help_text : Callable[[], str], msg : str) -> int:
    stdout.write(msg + '\n')
    stdout.write(help_text())
    return 1

# -> process exit code
def execute(options : Options,
            stdin : TextIO,
            stdout : TextIO,
            transport : Transport,
            help_text : Callable[[], str]) -> int:
    trace = Tracer(stdout, options.trace)

    trace.verbose('Starting sendemail. Validating receiver...')
    if options.receiver_count() == 0:
        return _usage(stdout, help_text,
                      'Specify at least one receiver using --to, --cc, '
                      'or --bcc.')

    message = options.message
    if not message and not stdin.isatty():
        trace.info('Message sourced from STDIN pipeline.')
        trace.verbose('Specify --message to supply the message instead. '
                      'Opening stream...')
        with stdin:
            trace.verbose('Stream opened...')
            message = stdin.read()
        trace.verbose('Stream closed.')

    trace.verbose('Validating message...')
    if not message:
        return _usage(stdout, help_text,
                      'Message body required from either STDIN or '
                      '--message.')

    trace.verbose('Creating SMTP transport...')
    config = TransportConfig(
        options.host, options.port,
        enable_tls=not options.disable_ssl,
        timeout=options.timeout,
        ehlo_hostname=options.ehlo_hostname)
    if options.username is not None and options.username.strip():
        trace.verbose('Using network credentials...')
        config.credentials = Credentials(options.username, options.password)
    elif options.password:
        trace.verbose('Ignoring --password without --username.')
    logging.debug('execute %s', config)

    trace.verbose('Creating message...')
    envelope = Envelope(options.sender, message, subject=options.subject)
    for t in options.to:
        trace.verbose('Adding %s to To...' % t)
        envelope.to.append(t)
    for cc in options.cc:
        trace.verbose('Adding %s to CC...' % cc)
        envelope.cc.append(cc)
    for bcc in options.bcc:
        trace.verbose('Adding %s to BCC...' % bcc)
        envelope.bcc.append(bcc)

    trace.info('Sending message to %d total recipients...' %
               options.receiver_count())
    transport.send(config, envelope)
    trace.verbose('Sent ' + message)
    return 0


def main(argv : List[str],
         stdin : Optional[TextIO] = None,
         stdout : Optional[TextIO] = None,
         transport : Optional[Transport] = None) -> int:
    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout
    parser = new_parser()
    args = parse_args(parser, argv)

    config = Config.load(args.config) if args.config else Config()
    if not config.configure_logging():
        logging.basicConfig(
            level=logging.WARNING,
            format='%(asctime)s [%(process)d] '
            '%(filename)s:%(lineno)d %(message)s')

    options = validate(args, config)
    if isinstance(options, list):
        for err in options:
            stdout.write(str(err) + '\n')
        stdout.write(parser.format_help())
        return 1
    logging.debug('main %s', options)

    if transport is None:
        transport = SmtpTransport()
    return execute(options, stdin, stdout, transport, parser.format_help)


def cli_main():
    sys.exit(main(sys.argv[1:]))

if __name__ == '__main__':
    cli_main()
