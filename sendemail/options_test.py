# Copyright The Koukan Authors
# SPDX-License-Identifier: Apache-2.0
import logging
import unittest

from sendemail.config import Config
from sendemail.options import (
    FieldError,
    Options,
    new_parser,
    normalize_argv,
    parse_args,
    validate )
from sendemail.tracer import TraceLevel

class OptionsTest(unittest.TestCase):
    def setUp(self):
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(message)s')
        self.parser = new_parser()

    def options(self, argv, config=None):
        opts = validate(parse_args(self.parser, argv), config)
        self.assertIsInstance(opts, Options)
        return opts

    def errors(self, argv, config=None):
        errs = validate(parse_args(self.parser, argv), config)
        self.assertIsInstance(errs, list)
        return errs

    def test_defaults(self):
        opts = self.options(['--from', 'a@x.com', '--to', 'b@x.com',
                             '--subject', 'Hi', '--message', 'hello'])
        self.assertEqual('a@x.com', opts.sender)
        self.assertEqual(('b@x.com',), opts.to)
        self.assertEqual((), opts.cc)
        self.assertEqual((), opts.bcc)
        self.assertEqual('Hi', opts.subject)
        self.assertEqual('hello', opts.message)
        self.assertEqual('localhost', opts.host)
        self.assertEqual(25, opts.port)
        self.assertIsNone(opts.username)
        self.assertIsNone(opts.password)
        self.assertIsNone(opts.trace)
        self.assertFalse(opts.disable_ssl)
        self.assertIsNone(opts.timeout)
        self.assertEqual(1, opts.receiver_count())

    def test_short_options(self):
        opts = self.options([
            '-f', 'a@x.com', '-t', 'b@x.com', '-t', 'c@x.com',
            '--cc', 'd@x.com', '--bcc', 'e@x.com', '--bcc', 'e@x.com',
            '-s', 'subj', '-m', 'body', '-h', 'mail.x.com', '-p', '587',
            '-xu', 'alice', '-xp', 'secret', '--disable-ssl',
            '--timeout', '2.5', '--ehlo', 'client.x.com'])
        self.assertEqual(('b@x.com', 'c@x.com'), opts.to)
        self.assertEqual(('d@x.com',), opts.cc)
        # not deduped
        self.assertEqual(('e@x.com', 'e@x.com'), opts.bcc)
        self.assertEqual('subj', opts.subject)
        self.assertEqual('body', opts.message)
        self.assertEqual('mail.x.com', opts.host)
        self.assertEqual(587, opts.port)
        self.assertEqual('alice', opts.username)
        self.assertEqual('secret', opts.password)
        self.assertTrue(opts.disable_ssl)
        self.assertEqual(2.5, opts.timeout)
        self.assertEqual('client.x.com', opts.ehlo_hostname)
        self.assertEqual(5, opts.receiver_count())

    def test_trace(self):
        base = ['--from', 'a@x.com']
        self.assertIsNone(self.options(base).trace)
        for argv, level in [
                (['--trace'], TraceLevel.INFO),
                (['-T'], TraceLevel.INFO),
                (['--trace:verbose'], TraceLevel.VERBOSE),
                (['-T:verbose'], TraceLevel.VERBOSE),
                (['--trace=verbose'], TraceLevel.VERBOSE),
                (['--trace', 'info'], TraceLevel.INFO),
                (['--trace:Verbose'], TraceLevel.VERBOSE)]:
            self.assertEqual(level, self.options(base + argv).trace, argv)
        # --trace followed by another option takes no value
        opts = self.options(['--trace', '--from', 'a@x.com'])
        self.assertEqual(TraceLevel.INFO, opts.trace)

    def test_normalize_argv(self):
        self.assertEqual(
            ['--trace=verbose', '-p=587', '-m', 'a:b', '--bogus:x',
             '--', '--trace:verbose'],
            normalize_argv(self.parser, [
                '--trace:verbose', '-p:587', '-m', 'a:b', '--bogus:x',
                '--', '--trace:verbose']))

    def test_from_required(self):
        self.assertEqual(
            [FieldError('from', 'The --from field is required.')],
            self.errors(['--to', 'b@x.com']))

    def test_bad_addresses(self):
        errs = self.errors(['--from', 'a', '--to', 'b@x.com', '--to', 'c',
                            '--cc', 'd@', '--bcc', '@e'])
        self.assertEqual(['from', 'to', 'cc', 'bcc'],
                         [e.field for e in errs])
        self.assertEqual(
            'The --to field is not a valid e-mail address: c', str(errs[1]))

    def test_port_range(self):
        for port in ['0', '65536', '-1']:
            errs = self.errors(['--from', 'a@x.com', '--port=' + port])
            self.assertEqual(['port'], [e.field for e in errs])
        self.assertEqual(65535, self.options(
            ['--from', 'a@x.com', '-p', '65535']).port)

    def test_timeout(self):
        errs = self.errors(['--from', 'a@x.com', '--timeout', '0'])
        self.assertEqual(['timeout'], [e.field for e in errs])

    def test_config(self):
        config = Config({'smtp': {
            'host': 'smtp.x.com',
            'port': 587,
            'username': 'alice',
            'password': 'secret',
            'disable_ssl': True,
            'timeout': 30,
            'ehlo': 'client.x.com'}})
        opts = self.options(['--from', 'a@x.com'], config)
        self.assertEqual('smtp.x.com', opts.host)
        self.assertEqual(587, opts.port)
        self.assertEqual('alice', opts.username)
        self.assertEqual('secret', opts.password)
        self.assertTrue(opts.disable_ssl)
        self.assertEqual(30.0, opts.timeout)
        self.assertEqual('client.x.com', opts.ehlo_hostname)

        opts = self.options(['--from', 'a@x.com', '-h', 'other.x.com',
                             '-p', '2525', '-xu', 'bob'], config)
        self.assertEqual('other.x.com', opts.host)
        self.assertEqual(2525, opts.port)
        self.assertEqual('bob', opts.username)

    def test_config_bad_port(self):
        errs = self.errors(['--from', 'a@x.com'],
                           Config({'smtp': {'port': 'smtp'}}))
        self.assertEqual(['port'], [e.field for e in errs])

    def test_config_types(self):
        errs = self.errors(['--from', 'a@x.com'],
                           Config({'smtp': {'username': 12345}}))
        self.assertEqual(['username'], [e.field for e in errs])
        self.assertEqual('The username setting must be a string: 12345',
                         errs[0].message)

        errs = self.errors(['--from', 'a@x.com'],
                           Config({'smtp': {'host': ['a', 'b'],
                                            'password': 1234,
                                            'ehlo': True,
                                            'disable_ssl': 'yes'}}))
        self.assertEqual(['host', 'password', 'ehlo', 'disable_ssl'],
                         [e.field for e in errs])

        # the command line value replaces the bad config value
        opts = self.options(['--from', 'a@x.com', '-xu', 'alice'],
                            Config({'smtp': {'username': 12345}}))
        self.assertEqual('alice', opts.username)

    def test_enable_ssl(self):
        config = Config({'smtp': {'disable_ssl': True}})
        self.assertTrue(self.options(['--from', 'a@x.com'],
                                     config).disable_ssl)
        self.assertFalse(self.options(['--from', 'a@x.com', '--enable-ssl'],
                                      config).disable_ssl)
        self.assertTrue(self.options(['--from', 'a@x.com', '--disable-ssl'],
                                     Config()).disable_ssl)
        self.assertFalse(self.options(['--from', 'a@x.com'],
                                      Config()).disable_ssl)

    def test_help(self):
        help = self.parser.format_help()
        for opt in ['--from', '--to', '--cc', '--bcc', '--message',
                    '--trace', '--disable-ssl', '--enable-ssl', '-?',
                    '-xu']:
            self.assertIn(opt, help)


if __name__ == '__main__':
    unittest.main()
