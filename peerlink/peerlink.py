#!/usr/bin/env python

import sys
import argparse
import logging
import contextlib

import peerlink


logger = logging.getLogger('peerlink')

FRAMED_BANNER = 'type a message and press Enter to send; Ctrl+D to quit'
RAW_BANNER = 'real-time: type to send. Press Ctrl-C to quit.'


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(prog='peerlink')
    parser.add_argument('--raw', default=False, action='store_true',
                        help='stream keystrokes as they are typed instead of whole lines')
    parser.add_argument('--prefix', default='[peer] ',
                        help='marker printed before each line received from the peer')
    parser.add_argument('--bind', default='', metavar='host',
                        help='local address to listen on (default: all interfaces)')
    parser.add_argument('--half-close', default=False, action='store_true',
                        help='on end of input, stop sending but keep receiving until the peer disconnects')
    parser.add_argument('--chunk-size', default=peerlink.CHUNK_SIZE, type=int, metavar='bytes')
    parser.add_argument('-v', '--verbose', default=False, action='store_true')

    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    listen = commands.add_parser('listen', help='wait for one peer to connect')
    listen.add_argument('port')

    connect = commands.add_parser('connect', help='connect to a listening peer')
    connect.add_argument('host')
    connect.add_argument('port')

    args = parser.parse_args(argv)

    try:
        args.port = int(args.port)
    except ValueError:
        args.port = -1
    if args.port < 0 or args.port > 65535:
        parser.error('port must be 0-65535')

    if args.chunk_size <= 0:
        parser.error('chunk size must be positive')

    return args


def establish(command, *, host=None, port, bind=''):
    if command == 'listen':
        conn, address = peerlink.accept_one(port, host=bind)
        return conn
    return peerlink.connect_to(host, port)


def run(command,
        *,
        host=None,
        port,
        raw=False,
        prefix=b'[peer] ',
        bind='',
        half_close=False,
        chunk_size=peerlink.CHUNK_SIZE,
        stdin=None,
        stdout=None):

    try:
        conn = establish(command, host=host, port=port, bind=bind)
    except peerlink.SetupError as e:
        logger.error(e)
        return 1

    sink = peerlink.OutputSink(stdout)
    options = dict(chunk_size=chunk_size, half_close=half_close)

    with contextlib.ExitStack() as stack:
        stack.callback(conn.close)
        if raw:
            try:
                stack.enter_context(peerlink.raw_input_mode(stdin))
            except peerlink.SetupError as e:
                logger.error(f'failed to enable raw terminal mode: {e}')
                return 1
            multiplexer = peerlink.RawMultiplexer(conn, peerlink.ByteInput(stdin), sink, **options)
            logger.info(RAW_BANNER)
        else:
            multiplexer = peerlink.FramedMultiplexer(conn, peerlink.LineInput(stdin), sink,
                                                     prefix=prefix, **options)
            logger.info(FRAMED_BANNER)

        termination = multiplexer.run()

    return termination.exit_code


def main(argv=None):
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return_code = run(args.command,
                      host=getattr(args, 'host', None),
                      port=args.port,
                      raw=args.raw,
                      prefix=args.prefix.encode(),
                      bind=args.bind,
                      half_close=args.half_close,
                      chunk_size=args.chunk_size)
    sys.exit(return_code)


if __name__ == '__main__':
    main()
